"""Data access layer for the account state"""

from datetime import date
from decimal import Decimal
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from allowance_ledger.config import settings
from allowance_ledger.domain.exceptions import StorageError
from allowance_ledger.domain.models import AccountState, Transaction, TransactionKind
from allowance_ledger.infrastructure.database.models import AccountRecord
from allowance_ledger.utils.date_utils import format_date, parse_date


def _date_or_none(value: Optional[str]) -> Optional[date]:
    return parse_date(value) if value else None


def _format_or_none(value: Optional[date]) -> Optional[str]:
    return format_date(value) if value else None


def transaction_to_record(txn: Transaction) -> Dict[str, Any]:
    return {
        "date": format_date(txn.date),
        "kind": txn.kind.value,
        "label": txn.label,
        "amount": str(txn.amount),
        "rate": str(txn.rate) if txn.rate is not None else None,
    }


def transaction_from_record(data: Dict[str, Any]) -> Transaction:
    rate = data.get("rate")
    return Transaction(
        date=parse_date(data["date"]),
        kind=TransactionKind(data["kind"]),
        amount=Decimal(data["amount"]),
        label=data.get("label") or "",
        rate=Decimal(rate) if rate is not None else None,
    )


def state_to_record(state: AccountState) -> Dict[str, Any]:
    """Serialize state to JSON-safe values: YYYY-MM-DD dates, decimal strings"""
    return {
        "account_holder": state.account_holder,
        "initial_balance": str(state.initial_balance),
        "start_date": format_date(state.start_date),
        "initial_allowance": str(state.initial_allowance),
        "initial_interest_rate": str(state.initial_interest_rate),
        "current_allowance": str(state.current_allowance),
        "current_interest_rate": str(state.current_interest_rate),
        "settings_change_date": _format_or_none(state.settings_change_date),
        "last_processed_saturday": _format_or_none(state.last_processed_saturday),
        "last_processed_sunday": _format_or_none(state.last_processed_sunday),
        "manual_transactions": [transaction_to_record(t) for t in state.manual_transactions],
        "auto_deposits": [transaction_to_record(t) for t in state.auto_deposits],
    }


def state_from_record(data: Dict[str, Any]) -> AccountState:
    return AccountState(
        account_holder=data["account_holder"],
        initial_balance=Decimal(data["initial_balance"]),
        start_date=parse_date(data["start_date"]),
        initial_allowance=Decimal(data["initial_allowance"]),
        initial_interest_rate=Decimal(data["initial_interest_rate"]),
        current_allowance=Decimal(data["current_allowance"]),
        current_interest_rate=Decimal(data["current_interest_rate"]),
        settings_change_date=_date_or_none(data.get("settings_change_date")),
        last_processed_saturday=_date_or_none(data.get("last_processed_saturday")),
        last_processed_sunday=_date_or_none(data.get("last_processed_sunday")),
        manual_transactions=tuple(transaction_from_record(t) for t in data.get("manual_transactions", [])),
        auto_deposits=tuple(transaction_from_record(t) for t in data.get("auto_deposits", [])),
    )


def default_state() -> AccountState:
    """First-run account built from configured defaults"""
    return AccountState.default(
        start_date=settings.default_start_date,
        account_holder=settings.default_account_holder,
        allowance=settings.default_allowance,
        interest_rate=settings.default_interest_rate,
    )


class AccountRepository:
    """Load and save the single account record"""

    def __init__(self, db: Session, key: str | None = None):
        self.db = db
        self.key = key or settings.account_key

    def load(self) -> AccountState:
        """
        Fetch the stored state, or the defaulted state if none exists yet.

        Raises:
            StorageError: On database errors or an unreadable record
        """
        try:
            record = (
                self.db.query(AccountRecord)
                .filter(AccountRecord.key == self.key)
                .first()
            )
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to load account state: {e}") from e

        if record is None:
            return default_state()

        try:
            return state_from_record(record.payload)
        except (KeyError, ValueError, TypeError, ArithmeticError) as e:
            raise StorageError(f"Stored account state is unreadable: {e}") from e

    def save(self, state: AccountState) -> None:
        """
        Write the whole state back (flushed, not committed).

        Raises:
            StorageError: On database errors
        """
        payload = state_to_record(state)
        try:
            record = self.db.get(AccountRecord, self.key)
            if record is None:
                self.db.add(AccountRecord(key=self.key, payload=payload))
            else:
                record.payload = payload
            self.db.flush()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to save account state: {e}") from e

    def commit(self) -> None:
        """
        Commit the pending save; a failed commit leaves nothing persisted.

        Raises:
            StorageError: On database errors
        """
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError(f"Failed to commit account state: {e}") from e
