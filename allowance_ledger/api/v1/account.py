"""GET /v1/account - Current ledger, balance and next deposit dates"""

import threading
import time
from datetime import date

from fastapi import APIRouter, Depends, Request

from allowance_ledger.api.dependencies import (
    get_account_lock,
    get_clock,
    get_repository,
    get_request_id,
    get_throttle,
)
from allowance_ledger.api.v1.errors import account_operation
from allowance_ledger.api.v1.schemas import AccountResponse, LedgerRowSchema, to_display
from allowance_ledger.domain.ledger import build_ledger, extend_schedule
from allowance_ledger.domain.models import AccountState
from allowance_ledger.infrastructure.database.repositories import AccountRepository
from allowance_ledger.infrastructure.observability.logging import log_recalculation
from allowance_ledger.infrastructure.observability.metrics import record_recalculation
from allowance_ledger.utils.clock import Clock, ScheduleThrottle
from allowance_ledger.utils.date_utils import SATURDAY, SUNDAY, next_occurrence

router = APIRouter()


def build_account_response(state: AccountState, today: date) -> AccountResponse:
    ledger = build_ledger(state)
    next_saturday = next_occurrence(SATURDAY, today)
    next_sunday = next_occurrence(SUNDAY, today)

    return AccountResponse(
        account_holder=state.account_holder,
        initial_balance=to_display(state.initial_balance),
        start_date=state.start_date,
        initial_allowance=to_display(state.initial_allowance),
        initial_interest=float(state.initial_interest_rate),
        current_allowance=to_display(state.current_allowance),
        current_interest=float(state.current_interest_rate),
        settings_change_date=state.settings_change_date,
        current_balance=to_display(ledger.current_balance),
        total_interest=to_display(ledger.total_interest),
        balance_without_interest=to_display(ledger.balance_without_interest),
        transactions=[LedgerRowSchema.from_row(row) for row in ledger.rows],
        as_of=today,
        next_saturday=next_saturday,
        next_sunday=next_sunday,
        days_until_saturday=(next_saturday - today).days,
        days_until_sunday=(next_sunday - today).days,
        is_saturday=today.weekday() == SATURDAY,
        is_sunday=today.weekday() == SUNDAY,
    )


@router.get("/account", response_model=AccountResponse)
def get_account(
    request: Request,
    repo: AccountRepository = Depends(get_repository),
    clock: Clock = Depends(get_clock),
    throttle: ScheduleThrottle = Depends(get_throttle),
    lock: threading.Lock = Depends(get_account_lock),
):
    """
    Return the account with every scheduled deposit due so far.

    Flow:
    1. Load state
    2. Generate allowance/interest since the watermarks (unless throttled)
    3. Save if anything was generated
    4. Build the chronological ledger
    """
    request_id = get_request_id(request)
    today = clock.today()

    with lock, account_operation(repo, request_id, "account read"):
        state = repo.load()

        if throttle.ready():
            start_time = time.perf_counter()
            extended, changed = extend_schedule(state, today)
            if changed:
                repo.save(extended)
                repo.commit()
                record_recalculation("extend", state.auto_deposits, extended.auto_deposits)
                log_recalculation(
                    request_id,
                    "extend",
                    len(extended.auto_deposits),
                    (time.perf_counter() - start_time) * 1000,
                )
            state = extended
            throttle.mark()

    return build_account_response(state, today)
