from core.services.recurrence.expander import expand_occurrences

__all__ = ["expand_occurrences"]
