"""Pydantic schemas for API request/response validation"""

import datetime as dt
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from allowance_ledger.domain.models import GoalOutcome, GoalProjection, LedgerRow

CENT = Decimal("0.01")

# Largest goal the calculator accepts
MAX_GOAL_AMOUNT = Decimal("1000000000000")


def to_display(amount: Optional[Decimal]) -> Optional[float]:
    """Round a stored amount to cents for display"""
    if amount is None:
        return None
    return float(amount.quantize(CENT, rounding=ROUND_HALF_UP))


class InitialSettingsRequest(BaseModel):
    """Request body for POST /v1/settings/initial; omitted fields are unchanged"""

    model_config = ConfigDict(extra="forbid")

    account_holder: Optional[str] = Field(None, max_length=100)
    initial_balance: Optional[Decimal] = Field(None, ge=0, allow_inf_nan=False)
    start_date: Optional[dt.date] = None
    initial_allowance: Optional[Decimal] = Field(None, ge=0, allow_inf_nan=False)
    initial_interest: Optional[Decimal] = Field(None, ge=0, allow_inf_nan=False, description="Weekly rate in percent")


class CurrentSettingsRequest(BaseModel):
    """Request body for POST /v1/settings/current"""

    model_config = ConfigDict(extra="forbid")

    current_allowance: Optional[Decimal] = Field(None, ge=0, allow_inf_nan=False)
    current_interest: Optional[Decimal] = Field(None, ge=0, allow_inf_nan=False, description="Weekly rate in percent")


class TransactionRequest(BaseModel):
    """Request body for POST /v1/transactions"""

    model_config = ConfigDict(extra="forbid")

    type: Literal["Deposit", "Withdrawal"]
    name: str = Field(..., min_length=1, max_length=200)
    amount: Decimal = Field(..., gt=0, allow_inf_nan=False)
    date: Optional[dt.date] = Field(None, description="Defaults to today")

    @property
    def signed_amount(self) -> Decimal:
        return self.amount if self.type == "Deposit" else -self.amount


class GoalRequest(BaseModel):
    """Request body for POST /v1/goals/projection"""

    model_config = ConfigDict(extra="forbid")

    goal_amount: Decimal = Field(..., gt=0, le=MAX_GOAL_AMOUNT, allow_inf_nan=False)
    goal_date: dt.date


class StatusResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None


class LedgerRowSchema(BaseModel):
    """Single ledger line"""

    date: dt.date
    type: str
    kind: str
    amount: float
    balance: float
    is_manual: bool
    manual_index: Optional[int] = None

    @classmethod
    def from_row(cls, row: LedgerRow) -> "LedgerRowSchema":
        return cls(
            date=row.date,
            type=row.description,
            kind=row.kind.value,
            amount=to_display(row.amount),
            balance=to_display(row.balance),
            is_manual=row.is_manual,
            manual_index=row.manual_index,
        )


class AccountResponse(BaseModel):
    """Response for GET /v1/account"""

    account_holder: str
    initial_balance: float
    start_date: dt.date
    initial_allowance: float
    initial_interest: float
    current_allowance: float
    current_interest: float
    settings_change_date: Optional[dt.date] = None
    current_balance: float
    total_interest: float
    balance_without_interest: float
    transactions: List[LedgerRowSchema]
    as_of: dt.date
    next_saturday: dt.date
    next_sunday: dt.date
    days_until_saturday: int
    days_until_sunday: int
    is_saturday: bool
    is_sunday: bool


class GoalResponse(BaseModel):
    """Response for POST /v1/goals/projection"""

    outcome: str
    will_reach: bool
    already_reached: bool
    current_balance: float
    goal_amount: float
    allowance_payments: int
    interest_payments: int
    days_until_goal: int
    total_allowance: float
    future_balance: Optional[float] = None
    future_balance_with_extra: Optional[float] = None
    shortfall: Optional[float] = None
    weekly_extra_needed: Optional[float] = None

    @classmethod
    def from_projection(cls, projection: GoalProjection) -> "GoalResponse":
        return cls(
            outcome=projection.outcome.value,
            will_reach=projection.will_reach,
            already_reached=projection.outcome is GoalOutcome.ALREADY_REACHED,
            current_balance=to_display(projection.current_balance),
            goal_amount=to_display(projection.goal_amount),
            allowance_payments=projection.allowance_payments,
            interest_payments=projection.interest_payments,
            days_until_goal=projection.days_until_goal,
            total_allowance=to_display(projection.total_allowance),
            future_balance=to_display(projection.future_balance),
            future_balance_with_extra=to_display(projection.future_balance_with_extra),
            shortfall=to_display(projection.shortfall),
            weekly_extra_needed=to_display(projection.weekly_extra_needed),
        )


class HealthResponse(BaseModel):
    status: str
    service: str
    storage: str
