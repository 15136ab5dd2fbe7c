"""POST /v1/goals/projection - Savings goal calculator"""

import logging
import threading

from fastapi import APIRouter, Depends, Request

from allowance_ledger.api.dependencies import get_account_lock, get_clock, get_repository, get_request_id
from allowance_ledger.api.v1.errors import account_operation
from allowance_ledger.api.v1.schemas import GoalRequest, GoalResponse
from allowance_ledger.domain.goals import project_goal
from allowance_ledger.domain.ledger import current_balance, extend_schedule
from allowance_ledger.infrastructure.database.repositories import AccountRepository
from allowance_ledger.infrastructure.observability.metrics import record_goal_projection
from allowance_ledger.utils.clock import Clock

router = APIRouter()


@router.post("/goals/projection", response_model=GoalResponse)
def project_savings_goal(
    body: GoalRequest,
    request: Request,
    repo: AccountRepository = Depends(get_repository),
    clock: Clock = Depends(get_clock),
    lock: threading.Lock = Depends(get_account_lock),
):
    """
    Project the balance at the goal date under the current rates.

    Read-only: deposits due so far are brought up to date in memory for the
    starting balance but nothing is saved.
    """
    request_id = get_request_id(request)
    today = clock.today()

    with lock, account_operation(repo, request_id, "goal projection"):
        state, _ = extend_schedule(repo.load(), today)

    projection = project_goal(
        current_balance=current_balance(state),
        current_allowance=state.current_allowance,
        current_interest_rate=state.current_interest_rate,
        goal_amount=body.goal_amount,
        goal_date=body.goal_date,
        today=today,
    )

    record_goal_projection(projection.outcome)
    logging.info(
        "Goal projection computed",
        extra={
            "request_id": request_id,
            "outcome": projection.outcome.value,
            "goal_date": body.goal_date.isoformat(),
        },
    )
    return GoalResponse.from_projection(projection)
