"""Dependency injection for FastAPI endpoints"""

import hmac
import threading
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from allowance_ledger.config import Settings, get_settings
from allowance_ledger.infrastructure.database.repositories import AccountRepository
from allowance_ledger.infrastructure.database.session import get_db
from allowance_ledger.utils.clock import Clock, ScheduleThrottle


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_clock(request: Request) -> Clock:
    return request.app.state.clock


def get_throttle(request: Request) -> ScheduleThrottle:
    return request.app.state.schedule_throttle


def get_account_lock(request: Request) -> threading.Lock:
    """Lock serializing every load-mutate-save cycle on the account"""
    return request.app.state.account_lock


def get_repository(db: Session = Depends(get_db)) -> AccountRepository:
    return AccountRepository(db)


@dataclass(frozen=True)
class OperatorCredentials:
    """Credential presented with a request, normalized from its headers"""

    token: Optional[str] = None

    @classmethod
    def from_request(cls, request: Request) -> "OperatorCredentials":
        scheme, _, value = request.headers.get("Authorization", "").partition(" ")
        if scheme.lower() != "bearer" or not value.strip():
            return cls()
        return cls(token=value.strip())


def can_edit(credentials: OperatorCredentials, settings: Settings) -> bool:
    """Edits are open when no operator token is configured"""
    if not settings.operator_token:
        return True
    if credentials.token is None:
        return False
    return hmac.compare_digest(credentials.token, settings.operator_token)


def require_operator(request: Request, settings: Settings = Depends(get_settings)) -> None:
    """Reject edit requests that do not carry the operator token"""
    if not can_edit(OperatorCredentials.from_request(request), settings):
        raise HTTPException(status_code=401, detail="Not authenticated")
