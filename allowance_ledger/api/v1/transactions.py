"""POST /v1/transactions and DELETE /v1/transactions/{index} - Manual deposits and withdrawals"""

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
from allowance_ledger.api.v1.schemas import StatusResponse, TransactionRequest
from allowance_ledger.domain.account import add_manual_transaction, delete_manual_transaction
from allowance_ledger.infrastructure.database.repositories import AccountRepository
from allowance_ledger.infrastructure.observability.logging import log_recalculation
from allowance_ledger.infrastructure.observability.metrics import record_recalculation
from allowance_ledger.utils.clock import Clock, ScheduleThrottle

router = APIRouter(dependencies=[Depends(require_operator)])


@router.post("/transactions", response_model=StatusResponse)
def add_transaction(
    body: TransactionRequest,
    request: Request,
    repo: AccountRepository = Depends(get_repository),
    clock: Clock = Depends(get_clock),
    lock: threading.Lock = Depends(get_account_lock),
    throttle: ScheduleThrottle = Depends(get_throttle),
):
    """Record a manual deposit or withdrawal and recalculate interest"""
    request_id = get_request_id(request)
    today = clock.today()
    pivot_date = body.date or today
    start_time = time.perf_counter()

    with lock, account_operation(repo, request_id, "add transaction"):
        state = repo.load()
        updated = add_manual_transaction(
            state,
            today,
            label=body.name,
            amount=body.signed_amount,
            on=pivot_date,
        )
        repo.save(updated)
        repo.commit()
        throttle.reset()

    record_recalculation("pivot", state.auto_deposits, updated.auto_deposits)
    log_recalculation(
        request_id,
        "pivot",
        len(updated.auto_deposits),
        (time.perf_counter() - start_time) * 1000,
        pivot_date=pivot_date,
    )
    return StatusResponse(message="Transaction added")


@router.delete("/transactions/{index}", response_model=StatusResponse)
def delete_transaction(
    index: int,
    request: Request,
    repo: AccountRepository = Depends(get_repository),
    clock: Clock = Depends(get_clock),
    lock: threading.Lock = Depends(get_account_lock),
    throttle: ScheduleThrottle = Depends(get_throttle),
):
    """Delete the manual transaction at positional `index` and recalculate interest"""
    request_id = get_request_id(request)
    start_time = time.perf_counter()

    with lock, account_operation(repo, request_id, "delete transaction"):
        state = repo.load()
        updated = delete_manual_transaction(state, clock.today(), index)
        repo.save(updated)
        repo.commit()
        throttle.reset()

    record_recalculation("pivot", state.auto_deposits, updated.auto_deposits)
    log_recalculation(
        request_id,
        "pivot",
        len(updated.auto_deposits),
        (time.perf_counter() - start_time) * 1000,
        pivot_date=state.manual_transactions[index].date,
    )
    return StatusResponse(message="Transaction deleted")
