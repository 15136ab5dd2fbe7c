"""POST /v1/settings/* - Initial and current account parameters"""

import logging
import threading
import time

from fastapi import APIRouter, Depends, Request

from allowance_ledger.api.dependencies import (
    get_account_lock,
    get_clock,
    get_repository,
    get_request_id,
    get_throttle,
    require_operator,
)
from allowance_ledger.api.v1.errors import account_operation
from allowance_ledger.api.v1.schemas import CurrentSettingsRequest, InitialSettingsRequest, StatusResponse
from allowance_ledger.domain.account import update_current_settings, update_initial_settings
from allowance_ledger.infrastructure.database.repositories import AccountRepository
from allowance_ledger.infrastructure.observability.logging import log_recalculation
from allowance_ledger.infrastructure.observability.metrics import record_recalculation
from allowance_ledger.utils.clock import Clock, ScheduleThrottle

router = APIRouter(dependencies=[Depends(require_operator)])


@router.post("/settings/initial", response_model=StatusResponse)
def set_initial_settings(
    body: InitialSettingsRequest,
    request: Request,
    repo: AccountRepository = Depends(get_repository),
    clock: Clock = Depends(get_clock),
    lock: threading.Lock = Depends(get_account_lock),
    throttle: ScheduleThrottle = Depends(get_throttle),
):
    """
    Change holder, starting balance, start date or initial rates.

    These feed every historical computation, so all scheduled deposits are
    discarded and regenerated from the start date.
    """
    request_id = get_request_id(request)
    start_time = time.perf_counter()

    with lock, account_operation(repo, request_id, "initial settings update"):
        state = repo.load()
        updated = update_initial_settings(
            state,
            clock.today(),
            account_holder=body.account_holder,
            initial_balance=body.initial_balance,
            start_date=body.start_date,
            initial_allowance=body.initial_allowance,
            initial_interest_rate=body.initial_interest,
        )
        repo.save(updated)
        repo.commit()
        throttle.reset()

    record_recalculation("full", state.auto_deposits, updated.auto_deposits)
    log_recalculation(
        request_id,
        "full",
        len(updated.auto_deposits),
        (time.perf_counter() - start_time) * 1000,
    )
    return StatusResponse(message="Initial settings updated")


@router.post("/settings/current", response_model=StatusResponse)
def set_current_settings(
    body: CurrentSettingsRequest,
    request: Request,
    repo: AccountRepository = Depends(get_repository),
    clock: Clock = Depends(get_clock),
    lock: threading.Lock = Depends(get_account_lock),
    throttle: ScheduleThrottle = Depends(get_throttle),
):
    """Change the rates used from the settings change date onward; history is kept"""
    request_id = get_request_id(request)

    with lock, account_operation(repo, request_id, "current settings update"):
        state = repo.load()
        updated = update_current_settings(
            state,
            clock.today(),
            current_allowance=body.current_allowance,
            current_interest_rate=body.current_interest,
        )
        repo.save(updated)
        repo.commit()
        throttle.reset()

    logging.info(
        "Current settings updated",
        extra={
            "request_id": request_id,
            "current_allowance": str(updated.current_allowance),
            "current_interest_rate": str(updated.current_interest_rate),
            "settings_change_date": updated.settings_change_date.isoformat(),
        },
    )
    return StatusResponse(message="Current settings updated")
