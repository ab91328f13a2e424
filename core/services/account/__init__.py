from core.services.account.service import AccountService

__all__ = ["AccountService"]
