"""State transitions for account edits - validate, apply, recalculate"""

from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Optional

from allowance_ledger.domain.exceptions import InvalidInputError, TransactionIndexError
from allowance_ledger.domain.ledger import recalculate_all_deposits, recalculate_from_transaction
from allowance_ledger.domain.models import AccountState, Transaction


def _non_negative(name: str, value: Optional[Decimal]) -> Optional[Decimal]:
    if value is None:
        return None
    if not value.is_finite() or value < 0:
        raise InvalidInputError(f"{name} must be a non-negative number")
    return value


def update_initial_settings(
    state: AccountState,
    today: date,
    account_holder: Optional[str] = None,
    initial_balance: Optional[Decimal] = None,
    start_date: Optional[date] = None,
    initial_allowance: Optional[Decimal] = None,
    initial_interest_rate: Optional[Decimal] = None,
) -> AccountState:
    """
    Change the account's starting parameters and rebuild every scheduled deposit.

    Omitted (None) fields and a blank holder name are left unchanged. Until the
    current rates have been edited they follow the initial rates.
    """
    initial_balance = _non_negative("initial_balance", initial_balance)
    initial_allowance = _non_negative("initial_allowance", initial_allowance)
    initial_interest_rate = _non_negative("initial_interest_rate", initial_interest_rate)

    changes = {}
    if account_holder is not None and account_holder.strip():
        changes["account_holder"] = account_holder.strip()
    if initial_balance is not None:
        changes["initial_balance"] = initial_balance
    if start_date is not None:
        changes["start_date"] = start_date
    if initial_allowance is not None:
        changes["initial_allowance"] = initial_allowance
    if initial_interest_rate is not None:
        changes["initial_interest_rate"] = initial_interest_rate

    updated = replace(state, **changes)
    if updated.settings_change_date is None:
        updated = replace(
            updated,
            current_allowance=updated.initial_allowance,
            current_interest_rate=updated.initial_interest_rate,
        )

    return recalculate_all_deposits(updated, today)


def update_current_settings(
    state: AccountState,
    today: date,
    current_allowance: Optional[Decimal] = None,
    current_interest_rate: Optional[Decimal] = None,
) -> AccountState:
    """
    Change the rates used from the settings change date onward.

    The change date is stamped with `today` the first time and never moved by
    later edits. Past deposits are untouched, so no recalculation is needed.
    """
    current_allowance = _non_negative("current_allowance", current_allowance)
    current_interest_rate = _non_negative("current_interest_rate", current_interest_rate)

    changes = {}
    if current_allowance is not None:
        changes["current_allowance"] = current_allowance
    if current_interest_rate is not None:
        changes["current_interest_rate"] = current_interest_rate
    if state.settings_change_date is None:
        changes["settings_change_date"] = today

    return replace(state, **changes)


def add_manual_transaction(
    state: AccountState,
    today: date,
    label: str,
    amount: Decimal,
    on: Optional[date] = None,
) -> AccountState:
    """Append a deposit (positive) or withdrawal (negative) and recalculate interest"""
    if not label or not label.strip():
        raise InvalidInputError("Transaction name is required")
    if not amount.is_finite() or amount == 0:
        raise InvalidInputError("Transaction amount must be a non-zero number")

    on = on or today
    txn = Transaction.manual(on, label.strip(), amount)
    updated = replace(state, manual_transactions=(*state.manual_transactions, txn))
    return recalculate_from_transaction(updated, on, today)


def delete_manual_transaction(state: AccountState, today: date, index: int) -> AccountState:
    """Remove the manual transaction at positional `index` and recalculate interest"""
    manual = state.manual_transactions
    if index < 0 or index >= len(manual):
        raise TransactionIndexError(index, len(manual))

    removed = manual[index]
    updated = replace(state, manual_transactions=manual[:index] + manual[index + 1:])
    return recalculate_from_transaction(updated, removed.date, today)
