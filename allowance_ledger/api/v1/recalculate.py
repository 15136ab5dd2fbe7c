"""POST /v1/recalculate - Rebuild every scheduled deposit (maintenance)"""

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
from allowance_ledger.api.v1.schemas import StatusResponse
from allowance_ledger.domain.ledger import recalculate_all_deposits
from allowance_ledger.infrastructure.database.repositories import AccountRepository
from allowance_ledger.infrastructure.observability.logging import log_recalculation
from allowance_ledger.infrastructure.observability.metrics import record_recalculation
from allowance_ledger.utils.clock import Clock, ScheduleThrottle

router = APIRouter(dependencies=[Depends(require_operator)])


@router.post("/recalculate", response_model=StatusResponse)
def recalculate(
    request: Request,
    repo: AccountRepository = Depends(get_repository),
    clock: Clock = Depends(get_clock),
    lock: threading.Lock = Depends(get_account_lock),
    throttle: ScheduleThrottle = Depends(get_throttle),
):
    request_id = get_request_id(request)
    start_time = time.perf_counter()

    with lock, account_operation(repo, request_id, "full recalculation"):
        state = repo.load()
        updated = recalculate_all_deposits(state, clock.today())
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
    return StatusResponse(message="All deposits recalculated successfully")
