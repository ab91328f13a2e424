"""
Cashflow envelope CLI

Usage:
    cashflow init --db cashflow.db
    cashflow account add --name Checking --balance 3420.50
    cashflow commitment add --name Rent --direction bill --amount 1850 --due 2026-03-01 --recurrence monthly
    cashflow pay --commitment <id> --amount 1850
    cashflow ledger post --description Groceries --amount 60 --account <id> --alloc <commitment>:2026-03-06:60
    cashflow project --days 28 --simulate <id>
    cashflow alerts
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Annotated, Iterator, List, Optional

import typer

from core.exceptions import DomainError
from core.models import (
    AccountType,
    AllocationRequest,
    CommitmentDirection,
    CommitmentPriority,
    LineItemInput,
)
from infra.config import resolve_db_url, sqlite_url
from infra.db.base import create_session_factory
from infra.logging_config import setup_logging
from infra.migrate import run_migrations
from infra.operational_support import bind_trace_id, get_operational_support
from infra.services import ServiceGraph, build_service_graph
from infra.version import get_app_version

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="cashflow",
    help="Household cash-flow envelopes and balance projection",
    add_completion=False,
)
account_app = typer.Typer(help="Account commands")
commitment_app = typer.Typer(help="Commitment commands")
ledger_app = typer.Typer(help="Ledger commands")
app.add_typer(account_app, name="account")
app.add_typer(commitment_app, name="commitment")
app.add_typer(ledger_app, name="ledger")

DbOption = Annotated[Optional[Path], typer.Option("--db", help="SQLite database path")]
AsOfOption = Annotated[
    Optional[datetime],
    typer.Option("--as-of", formats=["%Y-%m-%d"], help="Treat this date as today"),
]
DueOption = Annotated[
    Optional[datetime],
    typer.Option("--due", formats=["%Y-%m-%d"], help="Occurrence due date (default: next due)"),
]


def _db_url(db: Optional[Path]) -> str:
    return sqlite_url(db) if db is not None else resolve_db_url()


def _as_date(value: Optional[datetime]) -> Optional[date]:
    return value.date() if value is not None else None


@contextmanager
def _services(db: Optional[Path], command: str) -> Iterator[ServiceGraph]:
    url = _db_url(db)
    with bind_trace_id(None):
        run_migrations(url)
        session = create_session_factory(url)()
        try:
            yield build_service_graph(session)
        except DomainError as exc:
            get_operational_support().capture_exception(exc, context=command)
            logger.warning("%s rejected: %s", command, exc)
            typer.echo(f"Error [{exc.code}]: {exc}", err=True)
            raise typer.Exit(1)
        finally:
            session.close()


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
) -> None:
    setup_logging(logging.DEBUG if verbose else logging.INFO)


@app.command()
def version() -> None:
    """Show the application version"""
    typer.echo(get_app_version())


@app.command()
def init(db: DbOption = None) -> None:
    """Create or upgrade the database schema"""
    url = _db_url(db)
    with bind_trace_id(None):
        run_migrations(url)
    typer.echo(f"Initialized cashflow database: {url}")


@account_app.command("add")
def account_add(
    name: Annotated[str, typer.Option("--name", help="Account name")],
    account_type: Annotated[str, typer.Option("--type", help="checking, savings, cash or credit")] = AccountType.CHECKING.value,
    balance: Annotated[float, typer.Option("--balance", help="Current balance")] = 0.0,
    reserve: Annotated[bool, typer.Option("--reserve", help="Exclude from spendable balance")] = False,
    db: DbOption = None,
) -> None:
    """Add an account"""
    with _services(db, "account.add") as graph:
        account = graph.account_service.create_account(name, account_type, balance, reserve)
    typer.echo(f"Created account: {account.id}")


@account_app.command("list")
def account_list(db: DbOption = None) -> None:
    """List accounts and the spendable total"""
    with _services(db, "account.list") as graph:
        accounts = graph.account_service.list_accounts()
        spendable = graph.account_service.spendable_balance()
    for account in accounts:
        marker = " (reserve)" if account.is_reserve else ""
        typer.echo(f"  {account.id}: {account.name}{marker} {account.current_balance:.2f}")
    typer.echo(f"Spendable: {spendable:.2f}")


@account_app.command("reconcile")
def account_reconcile(
    account_id: Annotated[str, typer.Option("--id", help="Account ID")],
    balance: Annotated[float, typer.Option("--balance", help="Balance shown by the bank")],
    db: DbOption = None,
) -> None:
    """Overwrite an account balance with the observed one"""
    with _services(db, "account.reconcile") as graph:
        account = graph.account_service.reconcile(account_id, balance)
    typer.echo(f"Reconciled {account.name}: {account.current_balance:.2f}")


@commitment_app.command("add")
def commitment_add(
    name: Annotated[str, typer.Option("--name", help="Commitment name")],
    amount: Annotated[float, typer.Option("--amount", help="Nominal amount")],
    due: Annotated[datetime, typer.Option("--due", formats=["%Y-%m-%d"], help="Next due date")],
    direction: Annotated[str, typer.Option("--direction", help="income or bill")] = CommitmentDirection.BILL.value,
    recurrence: Annotated[
        Optional[str],
        typer.Option("--recurrence", help="weekly, biweekly, monthly, quarterly, annual or every_N_days|weeks"),
    ] = None,
    priority: Annotated[str, typer.Option("--priority", help="critical, normal or flexible")] = CommitmentPriority.NORMAL.value,
    autopay: Annotated[bool, typer.Option("--autopay", help="Paid automatically")] = False,
    account: Annotated[Optional[str], typer.Option("--account", help="Paying account ID")] = None,
    db: DbOption = None,
) -> None:
    """Add a recurring or one-time commitment"""
    with _services(db, "commitment.add") as graph:
        commitment = graph.commitment_service.create_commitment(
            name=name,
            direction=direction,
            amount=amount,
            due_date=due.date(),
            recurrence_rule=recurrence,
            priority=priority,
            autopay=autopay,
            account_id=account,
        )
    typer.echo(f"Created commitment: {commitment.id}")


@commitment_app.command("list")
def commitment_list(db: DbOption = None) -> None:
    """List commitments"""
    with _services(db, "commitment.list") as graph:
        commitments = graph.commitment_service.list_commitments()
    if not commitments:
        typer.echo("No commitments")
        return
    for c in commitments:
        rule = c.recurrence.to_rule() if c.recurrence else "one-time"
        state = "paid" if c.paid else ("active" if c.active else "inactive")
        typer.echo(
            f"  {c.id}: {c.name} {c.direction.value} {c.amount:.2f} due {c.due_date.isoformat()} "
            f"[{rule}, {c.priority.value}, {state}]"
        )


@app.command()
def pay(
    commitment: Annotated[str, typer.Option("--commitment", help="Commitment ID")],
    amount: Annotated[float, typer.Option("--amount", help="Amount actually paid")],
    due: DueOption = None,
    note: Annotated[Optional[str], typer.Option("--note", help="Payment note")] = None,
    account: Annotated[Optional[str], typer.Option("--account", help="Override paying account")] = None,
    db: DbOption = None,
) -> None:
    """Record a payment against one occurrence"""
    with _services(db, "commitment.mark_paid") as graph:
        entry = graph.payment_service.mark_paid(
            commitment,
            amount,
            instance_due_date=_as_date(due),
            note=note,
            account_id=account,
        )
    typer.echo(f"Recorded payment: {entry.id}")


@app.command()
def rollover(
    commitment: Annotated[str, typer.Option("--commitment", help="Commitment ID")],
    due: DueOption = None,
    as_of: AsOfOption = None,
    db: DbOption = None,
) -> None:
    """Close an occurrence and carry its leftover into the next one"""
    with _services(db, "commitment.rollover") as graph:
        closed = graph.payment_service.rollover(commitment, _as_date(due), as_of=_as_date(as_of))
    typer.echo(f"Rolled over {closed.leftover:.2f} to {closed.next_due_date.isoformat()}")


@app.command()
def release(
    commitment: Annotated[str, typer.Option("--commitment", help="Commitment ID")],
    due: DueOption = None,
    as_of: AsOfOption = None,
    db: DbOption = None,
) -> None:
    """Close an occurrence and release its leftover to general cash"""
    with _services(db, "commitment.release") as graph:
        closed = graph.payment_service.release(commitment, _as_date(due), as_of=_as_date(as_of))
    typer.echo(f"Released {closed.leftover:.2f}")


def _parse_allocation(value: str) -> AllocationRequest:
    parts = value.split(":")
    if len(parts) != 3:
        raise typer.BadParameter(f"expected COMMITMENT:YYYY-MM-DD:AMOUNT, got {value!r}", param_hint="--alloc")
    commitment_id, due, amount = parts
    try:
        return AllocationRequest(
            commitment_id=commitment_id.strip(),
            instance_due_date=datetime.strptime(due.strip(), "%Y-%m-%d").date(),
            amount=float(amount),
        )
    except ValueError as exc:
        raise typer.BadParameter(f"invalid allocation {value!r}: {exc}", param_hint="--alloc") from exc


def _parse_line_item(value: str) -> LineItemInput:
    description, sep, amount = value.rpartition(":")
    if not sep or not description.strip():
        raise typer.BadParameter(f"expected DESCRIPTION:AMOUNT, got {value!r}", param_hint="--item")
    try:
        return LineItemInput(description.strip(), float(amount))
    except ValueError as exc:
        raise typer.BadParameter(f"invalid line item {value!r}: {exc}", param_hint="--item") from exc


AllocOption = Annotated[
    Optional[List[str]],
    typer.Option("--alloc", help="Allocation as COMMITMENT:YYYY-MM-DD:AMOUNT (repeatable)"),
]
ItemOption = Annotated[
    Optional[List[str]],
    typer.Option("--item", help="Line item as DESCRIPTION:AMOUNT (repeatable)"),
]


@ledger_app.command("post")
def ledger_post(
    description: Annotated[str, typer.Option("--description", help="What the money was for")],
    amount: Annotated[float, typer.Option("--amount", help="Entry amount")],
    account: Annotated[str, typer.Option("--account", help="Account ID")],
    entry_type: Annotated[str, typer.Option("--type", help="income or expense")] = "expense",
    alloc: AllocOption = None,
    item: ItemOption = None,
    on: Annotated[
        Optional[datetime],
        typer.Option("--date", formats=["%Y-%m-%d"], help="Entry date (default: today)"),
    ] = None,
    db: DbOption = None,
) -> None:
    """Record money in or out and allocate it to envelopes"""
    allocations = [_parse_allocation(a) for a in alloc or ()]
    line_items = [_parse_line_item(i) for i in item or ()]
    with _services(db, "ledger.post") as graph:
        entry = graph.ledger_service.post_entry(
            description,
            amount,
            entry_type,
            account,
            allocations=allocations,
            line_items=line_items,
            entry_date=_as_date(on),
        )
    typer.echo(f"Created entry: {entry.id}")


@ledger_app.command("edit")
def ledger_edit(
    entry_id: Annotated[str, typer.Option("--id", help="Ledger entry ID")],
    description: Annotated[Optional[str], typer.Option("--description", help="New description")] = None,
    amount: Annotated[Optional[float], typer.Option("--amount", help="New amount")] = None,
    entry_type: Annotated[Optional[str], typer.Option("--type", help="income or expense")] = None,
    account: Annotated[Optional[str], typer.Option("--account", help="New account ID")] = None,
    alloc: AllocOption = None,
    clear_allocs: Annotated[bool, typer.Option("--clear-allocs", help="Leave the entry unallocated")] = False,
    item: ItemOption = None,
    db: DbOption = None,
) -> None:
    """Change an entry; its allocations are reversed and re-applied"""
    if clear_allocs and alloc:
        raise typer.BadParameter("--clear-allocs cannot be combined with --alloc", param_hint="--clear-allocs")
    allocations = [] if clear_allocs else ([_parse_allocation(a) for a in alloc] if alloc else None)
    line_items = [_parse_line_item(i) for i in item] if item else None
    with _services(db, "ledger.edit") as graph:
        entry = graph.ledger_service.edit_entry(
            entry_id,
            description=description,
            amount=amount,
            entry_type=entry_type,
            account_id=account,
            allocations=allocations,
            line_items=line_items,
        )
    typer.echo(f"Updated entry: {entry.id} ({len(entry.allocations)} allocation(s))")


@ledger_app.command("delete")
def ledger_delete(
    entry_id: Annotated[str, typer.Option("--id", help="Ledger entry ID")],
    db: DbOption = None,
) -> None:
    """Delete an entry and take its allocations back out"""
    with _services(db, "ledger.delete") as graph:
        graph.ledger_service.delete_entry(entry_id)
    typer.echo(f"Deleted entry: {entry_id}")


@ledger_app.command("list")
def ledger_list(db: DbOption = None) -> None:
    """List entries, newest first"""
    with _services(db, "ledger.list") as graph:
        entries = graph.ledger_service.list_entries()
    if not entries:
        typer.echo("No entries")
        return
    for entry in entries:
        typer.echo(
            f"  {entry.id}: {entry.entry_date.isoformat()} {entry.entry_type.value} "
            f"{entry.amount:.2f} {entry.description}"
        )
        for allocation in entry.allocations:
            typer.echo(f"      -> {allocation.commitment_id} {allocation.amount:.2f}")

@app.command()
def instances(
    include_funded: Annotated[bool, typer.Option("--all", help="Include funded envelopes")] = False,
    days: Annotated[int, typer.Option("--days", help="Window length for --all")] = 28,
    as_of: AsOfOption = None,
    db: DbOption = None,
) -> None:
    """List envelopes that can take allocations"""
    today = _as_date(as_of) or date.today()
    with _services(db, "instances") as graph:
        if include_funded:
            rows = graph.instance_service.get_all_instances_for_window(
                today + timedelta(days=days), as_of=today
            )
        else:
            rows = graph.instance_service.get_eligible_instances(as_of=today)
    if not rows:
        typer.echo("No open envelopes")
        return
    for row in rows:
        typer.echo(
            f"  {row.due_date.isoformat()} {row.commitment_name}: "
            f"{row.allocated_amount:.2f}/{row.planned_amount:.2f} "
            f"remaining {max(0.0, row.remaining_amount):.2f} [{row.status.value}]"
        )


@app.command()
def project(
    days: Annotated[int, typer.Option("--days", help="Horizon in days")] = 28,
    simulate: Annotated[
        Optional[List[str]],
        typer.Option("--simulate", help="One-time commitment ID to pay today instead"),
    ] = None,
    as_of: AsOfOption = None,
    db: DbOption = None,
) -> None:
    """Print the day-by-day projected balance"""
    with _services(db, "project") as graph:
        projection = graph.projection_service.project(days, simulate or (), as_of=_as_date(as_of))
    for day in projection:
        names = ", ".join(f"{o.label} {o.amount:.2f}" for o in day.occurrences)
        suffix = f"  <- {names}" if names else ""
        typer.echo(f"{day.day.isoformat()} {day.balance:>12.2f}{suffix}")


@app.command()
def alerts(as_of: AsOfOption = None, db: DbOption = None) -> None:
    """Show risk alerts for the next two weeks"""
    with _services(db, "alerts") as graph:
        found = graph.alert_service.generate_alerts(as_of=_as_date(as_of))
    if not found:
        typer.echo("No alerts")
        return
    for alert in found:
        typer.echo(f"[{alert.severity.value}] {alert.message} -> {alert.action}")


if __name__ == "__main__":
    app()
