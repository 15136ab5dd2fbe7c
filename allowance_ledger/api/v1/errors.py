"""Map domain failures onto HTTP responses"""

import logging
from contextlib import contextmanager
from typing import Iterator

from fastapi import HTTPException

from allowance_ledger.domain.exceptions import InvalidInputError, StorageError, TransactionIndexError
from allowance_ledger.infrastructure.database.repositories import AccountRepository
from allowance_ledger.infrastructure.observability.metrics import storage_failures_counter


@contextmanager
def account_operation(repo: AccountRepository, request_id: str, action: str) -> Iterator[None]:
    """
    Run one load-mutate-save cycle; on any failure roll back and raise the HTTP error.

    Nothing is treated as committed unless the block completes.
    """
    try:
        yield
    except HTTPException:
        repo.db.rollback()
        raise
    except StorageError as e:
        storage_failures_counter.inc()
        repo.db.rollback()
        logging.error(f"Storage error during {action}: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Account storage unavailable")
    except TransactionIndexError as e:
        repo.db.rollback()
        logging.warning(f"Rejected {action}: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=400, detail="Invalid transaction index")
    except InvalidInputError as e:
        repo.db.rollback()
        logging.warning(f"Rejected {action}: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        repo.db.rollback()
        logging.exception(f"Unexpected error during {action}: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")
