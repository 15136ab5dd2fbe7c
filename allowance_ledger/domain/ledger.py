"""Ledger recalculation engine - scheduled deposits, interest and running balances"""

import logging
from dataclasses import replace
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, List, Tuple

from allowance_ledger.domain.models import (
    AccountState,
    Ledger,
    LedgerRow,
    Transaction,
    TransactionKind,
)
from allowance_ledger.utils.date_utils import SATURDAY, SUNDAY, weekly_occurrences

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(days=1)


def balance_before(initial_balance: Decimal, transactions: Iterable[Transaction], day: date) -> Decimal:
    """Balance as of just before `day`: every transaction dated strictly earlier"""
    earlier = sorted((t for t in transactions if t.date < day), key=lambda t: t.date)
    balance = initial_balance
    for txn in earlier:
        balance += txn.amount
    return balance


def current_balance(state: AccountState) -> Decimal:
    """Initial balance plus every manual and auto transaction"""
    return state.initial_balance + sum(
        (t.amount for t in (*state.auto_deposits, *state.manual_transactions)),
        Decimal("0"),
    )


def _pending_occurrences(state: AccountState, today: date) -> List[Tuple[date, TransactionKind]]:
    """Allowance Saturdays and interest Sundays past the watermarks, in date order"""
    saturday_start = (
        state.last_processed_saturday + ONE_DAY
        if state.last_processed_saturday is not None
        else state.start_date
    )
    sunday_start = (
        state.last_processed_sunday + ONE_DAY
        if state.last_processed_sunday is not None
        else state.start_date
    )

    pending = [(day, TransactionKind.ALLOWANCE) for day in weekly_occurrences(SATURDAY, saturday_start, today)]
    pending += [(day, TransactionKind.INTEREST) for day in weekly_occurrences(SUNDAY, sunday_start, today)]
    pending.sort(key=lambda item: item[0])
    return pending


def extend_schedule(state: AccountState, today: date) -> Tuple[AccountState, bool]:
    """
    Materialize every allowance and interest occurrence since the watermarks.

    Occurrences from both streams are processed in ascending date order so each
    interest payment sees the allowances (and earlier interest) generated in the
    same pass. Interest is computed on the balance as of just before its Sunday;
    a zero or negative result is not recorded, but the Sunday still counts as
    processed.

    Returns:
        (new_state, changed) - `changed` is True when any occurrence was processed
        and the state therefore needs saving.
    """
    pending = _pending_occurrences(state, today)
    if not pending:
        return state, False

    auto_deposits = list(state.auto_deposits)
    last_saturday = state.last_processed_saturday
    last_sunday = state.last_processed_sunday

    for day, kind in pending:
        allowance, rate = state.rates_on(day)

        if kind is TransactionKind.ALLOWANCE:
            auto_deposits.append(Transaction.allowance(day, allowance))
            last_saturday = day
            continue

        balance = balance_before(
            state.initial_balance,
            (*auto_deposits, *state.manual_transactions),
            day,
        )
        interest = balance * (rate / Decimal(100))
        if interest > 0:
            auto_deposits.append(Transaction.interest(day, interest, rate))
        else:
            logger.debug("No interest on %s (balance %s)", day, balance)
        last_sunday = day

    logger.debug(
        "Extended schedule through %s: %d occurrence(s) processed",
        today,
        len(pending),
    )

    new_state = replace(
        state,
        auto_deposits=tuple(auto_deposits),
        last_processed_saturday=last_saturday,
        last_processed_sunday=last_sunday,
    )
    return new_state, True


def recalculate_from_transaction(state: AccountState, pivot_date: date, today: date) -> AccountState:
    """
    Rebuild interest after a manual transaction was added or removed at `pivot_date`.

    Interest depends on the balance, so every interest entry is discarded and
    regenerated from the start date; allowance entries are fixed amounts and are
    kept as they are. The whole interest history is regenerated rather than just
    the part after the pivot, since manual transactions can be entered out of
    chronological order.
    """
    allowances = tuple(t for t in state.auto_deposits if t.kind is TransactionKind.ALLOWANCE)
    last_saturday = max((t.date for t in allowances), default=None)

    logger.info(
        "Recalculating interest after change on %s (%d allowance entries kept)",
        pivot_date,
        len(allowances),
    )

    reset = replace(
        state,
        auto_deposits=allowances,
        last_processed_saturday=last_saturday,
        last_processed_sunday=None,
    )
    new_state, _ = extend_schedule(reset, today)
    return new_state


def recalculate_all_deposits(state: AccountState, today: date) -> AccountState:
    """Discard every auto deposit and both watermarks, then regenerate from the start date"""
    logger.info("Rebuilding all scheduled deposits from %s", state.start_date)
    reset = replace(
        state,
        auto_deposits=(),
        last_processed_saturday=None,
        last_processed_sunday=None,
    )
    new_state, _ = extend_schedule(reset, today)
    return new_state


def build_ledger(state: AccountState) -> Ledger:
    """
    Merge auto and manual transactions into one chronological ledger.

    Same-day entries keep a stable order: auto deposits first, then manual
    transactions in insertion order. Manual rows carry their positional index.
    """
    entries = [(txn, None) for txn in state.auto_deposits]
    entries += [(txn, index) for index, txn in enumerate(state.manual_transactions)]
    entries.sort(key=lambda entry: entry[0].date)

    balance = state.initial_balance
    total_interest = Decimal("0")
    rows = []
    for txn, manual_index in entries:
        balance += txn.amount
        if txn.kind is TransactionKind.INTEREST:
            total_interest += txn.amount
        rows.append(
            LedgerRow(
                date=txn.date,
                description=txn.description,
                kind=txn.kind,
                amount=txn.amount,
                balance=balance,
                manual_index=manual_index,
            )
        )

    return Ledger(
        rows=tuple(rows),
        current_balance=balance,
        total_interest=total_interest,
        balance_without_interest=balance - total_interest,
    )
