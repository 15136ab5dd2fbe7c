"""Savings goal projection and weekly top-up solver"""

from datetime import date
from decimal import ROUND_CEILING, Decimal, localcontext
from typing import List, Sequence

from allowance_ledger.domain.models import GoalOutcome, GoalProjection, TransactionKind
from allowance_ledger.utils.date_utils import SATURDAY, SUNDAY, weekly_occurrences

CENT = Decimal("0.01")
ZERO = Decimal("0")

# Enough halvings to narrow any bracket a 28-digit Decimal can hold to a cent
MAX_BISECTION_STEPS = 200


def scheduled_events(today: date, goal_date: date) -> List[TransactionKind]:
    """Allowance and interest events after today up to the goal date, in date order"""
    events = [(day, TransactionKind.ALLOWANCE) for day in weekly_occurrences(SATURDAY, today, goal_date)]
    events += [(day, TransactionKind.INTEREST) for day in weekly_occurrences(SUNDAY, today, goal_date)]
    events.sort(key=lambda item: item[0])
    return [kind for _, kind in events]


def simulate_balance(
    start_balance: Decimal,
    events: Sequence[TransactionKind],
    allowance: Decimal,
    interest_rate: Decimal,
    weekly_extra: Decimal = ZERO,
) -> Decimal:
    """
    Play the schedule forward.

    Allowance events add the allowance plus `weekly_extra`; interest events
    compound the running balance, extra deposits included.
    """
    growth = 1 + interest_rate / Decimal(100)
    balance = start_balance
    for kind in events:
        if kind is TransactionKind.ALLOWANCE:
            balance += allowance + weekly_extra
        else:
            balance *= growth
    return balance


def solve_weekly_extra(
    start_balance: Decimal,
    events: Sequence[TransactionKind],
    allowance: Decimal,
    interest_rate: Decimal,
    goal_amount: Decimal,
    upper_bound: Decimal,
    tolerance: Decimal = CENT,
) -> Decimal:
    """
    Smallest whole-cent weekly extra that reaches `goal_amount`.

    Bisects on [0, upper_bound] until the bracket is within `tolerance`, then
    rounds the passing bound up to the cent. The bracket is narrower than two
    cents at that point, so at most one cent less can still pass; that one
    candidate is checked. Bisection also stops once the midpoint can no longer
    be represented between the bounds, so very large goals still terminate.
    """

    def reaches(extra: Decimal) -> bool:
        return simulate_balance(start_balance, events, allowance, interest_rate, extra) >= goal_amount

    low, high = ZERO, upper_bound
    for _ in range(MAX_BISECTION_STEPS):
        if high - low <= tolerance:
            break
        mid = (low + high) / 2
        if mid in (low, high):
            # Bracket is below the working precision
            break
        if reaches(mid):
            high = mid
        else:
            low = mid

    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, high.adjusted() + 4)
        extra = high.quantize(CENT, rounding=ROUND_CEILING)
        if extra >= CENT and reaches(extra - CENT):
            extra -= CENT
    return extra


def project_goal(
    current_balance: Decimal,
    current_allowance: Decimal,
    current_interest_rate: Decimal,
    goal_amount: Decimal,
    goal_date: date,
    today: date,
) -> GoalProjection:
    """
    Project whether the current schedule reaches `goal_amount` by `goal_date`.

    Outcomes:
    - ALREADY_REACHED: the balance already covers the goal
    - TOO_SOON: no allowance or interest day falls before the goal date
    - WILL_REACH: the schedule alone gets there
    - NEEDS_EXTRA: a weekly extra deposit is required; `weekly_extra_needed` is
      None when no allowance day is left to deposit it on
    """
    events = scheduled_events(today, goal_date)
    allowance_payments = sum(1 for kind in events if kind is TransactionKind.ALLOWANCE)
    interest_payments = len(events) - allowance_payments
    days_until_goal = (goal_date - today).days

    if goal_amount <= current_balance:
        return GoalProjection(
            outcome=GoalOutcome.ALREADY_REACHED,
            current_balance=current_balance,
            goal_amount=goal_amount,
            allowance_payments=allowance_payments,
            interest_payments=interest_payments,
            days_until_goal=days_until_goal,
            total_allowance=allowance_payments * current_allowance,
        )

    if not events:
        return GoalProjection(
            outcome=GoalOutcome.TOO_SOON,
            current_balance=current_balance,
            goal_amount=goal_amount,
            days_until_goal=days_until_goal,
            shortfall=goal_amount - current_balance,
        )

    summary = dict(
        current_balance=current_balance,
        goal_amount=goal_amount,
        allowance_payments=allowance_payments,
        interest_payments=interest_payments,
        days_until_goal=days_until_goal,
        total_allowance=allowance_payments * current_allowance,
    )

    future_balance = simulate_balance(current_balance, events, current_allowance, current_interest_rate)
    if future_balance >= goal_amount:
        return GoalProjection(outcome=GoalOutcome.WILL_REACH, future_balance=future_balance, **summary)

    shortfall = goal_amount - future_balance
    weekly_extra = None
    future_with_extra = future_balance
    if allowance_payments:
        weekly_extra = solve_weekly_extra(
            current_balance,
            events,
            current_allowance,
            current_interest_rate,
            goal_amount,
            upper_bound=shortfall,
        )
        future_with_extra = simulate_balance(
            current_balance, events, current_allowance, current_interest_rate, weekly_extra
        )

    return GoalProjection(
        outcome=GoalOutcome.NEEDS_EXTRA,
        future_balance=future_balance,
        future_balance_with_extra=future_with_extra,
        shortfall=shortfall,
        weekly_extra_needed=weekly_extra,
        **summary,
    )
