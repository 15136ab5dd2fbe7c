"""Domain models - immutable dataclasses representing the account and its ledger"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple

ALLOWANCE_LABEL = "Weekly Allowance"


class TransactionKind(str, Enum):
    """What produced a transaction"""

    ALLOWANCE = "allowance"
    INTEREST = "interest"
    MANUAL_DEPOSIT = "manual_deposit"
    MANUAL_WITHDRAWAL = "manual_withdrawal"

    @property
    def is_auto(self) -> bool:
        return self in (TransactionKind.ALLOWANCE, TransactionKind.INTEREST)


def format_rate(rate: Decimal) -> str:
    """Render a percentage without trailing zeros: 1.0 -> "1", 2.50 -> "2.5" """
    return f"{rate.normalize():f}"


@dataclass(frozen=True)
class Transaction:
    """Single ledger entry; amount is signed (negative = withdrawal)"""

    date: date
    kind: TransactionKind
    amount: Decimal
    label: str = ""
    rate: Optional[Decimal] = None  # interest entries only

    @classmethod
    def allowance(cls, on: date, amount: Decimal) -> "Transaction":
        return cls(date=on, kind=TransactionKind.ALLOWANCE, amount=amount)

    @classmethod
    def interest(cls, on: date, amount: Decimal, rate: Decimal) -> "Transaction":
        return cls(date=on, kind=TransactionKind.INTEREST, amount=amount, rate=rate)

    @classmethod
    def manual(cls, on: date, label: str, amount: Decimal) -> "Transaction":
        kind = TransactionKind.MANUAL_DEPOSIT if amount >= 0 else TransactionKind.MANUAL_WITHDRAWAL
        return cls(date=on, kind=kind, amount=amount, label=label)

    @property
    def description(self) -> str:
        if self.kind is TransactionKind.ALLOWANCE:
            return ALLOWANCE_LABEL
        if self.kind is TransactionKind.INTEREST:
            return f"Interest @ {format_rate(self.rate)}%"
        return self.label


@dataclass(frozen=True)
class AccountState:
    """
    The whole stored account.

    `manual_transactions` and the rate/date parameters are user-entered;
    `auto_deposits` and both watermarks are derived and can be regenerated.
    """

    account_holder: str
    initial_balance: Decimal
    start_date: date
    initial_allowance: Decimal
    initial_interest_rate: Decimal
    current_allowance: Decimal
    current_interest_rate: Decimal
    settings_change_date: Optional[date] = None
    last_processed_saturday: Optional[date] = None
    last_processed_sunday: Optional[date] = None
    manual_transactions: Tuple[Transaction, ...] = field(default_factory=tuple)
    auto_deposits: Tuple[Transaction, ...] = field(default_factory=tuple)

    @classmethod
    def default(
        cls,
        start_date: date,
        account_holder: str = "My",
        allowance: Decimal = Decimal("5.0"),
        interest_rate: Decimal = Decimal("1.0"),
    ) -> "AccountState":
        return cls(
            account_holder=account_holder,
            initial_balance=Decimal("0"),
            start_date=start_date,
            initial_allowance=allowance,
            initial_interest_rate=interest_rate,
            current_allowance=allowance,
            current_interest_rate=interest_rate,
        )

    def rates_on(self, day: date) -> Tuple[Decimal, Decimal]:
        """(allowance, interest rate %) in effect on `day`"""
        if self.settings_change_date is not None and day >= self.settings_change_date:
            return self.current_allowance, self.current_interest_rate
        return self.initial_allowance, self.initial_interest_rate


@dataclass(frozen=True)
class LedgerRow:
    """Displayable ledger line with the running balance after it"""

    date: date
    description: str
    kind: TransactionKind
    amount: Decimal
    balance: Decimal
    manual_index: Optional[int] = None

    @property
    def is_manual(self) -> bool:
        return self.manual_index is not None


@dataclass(frozen=True)
class Ledger:
    """Chronological ledger plus summary figures"""

    rows: Tuple[LedgerRow, ...]
    current_balance: Decimal
    total_interest: Decimal
    balance_without_interest: Decimal


class GoalOutcome(str, Enum):
    ALREADY_REACHED = "already_reached"
    TOO_SOON = "too_soon"
    WILL_REACH = "will_reach"
    NEEDS_EXTRA = "needs_extra"


@dataclass(frozen=True)
class GoalProjection:
    """Result of a savings-goal projection"""

    outcome: GoalOutcome
    current_balance: Decimal
    goal_amount: Decimal
    allowance_payments: int = 0
    interest_payments: int = 0
    days_until_goal: int = 0
    total_allowance: Decimal = Decimal("0")
    future_balance: Optional[Decimal] = None
    future_balance_with_extra: Optional[Decimal] = None
    shortfall: Optional[Decimal] = None
    weekly_extra_needed: Optional[Decimal] = None

    @property
    def will_reach(self) -> bool:
        return self.outcome in (GoalOutcome.ALREADY_REACHED, GoalOutcome.WILL_REACH)
