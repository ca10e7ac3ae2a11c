"""
FastAPI dependencies (DB session, authentication, transaction deadline)
"""
from fastapi import Request, HTTPException, status

from app.config import get_settings
from app.infrastructure.db.session import get_db as _get_db


# Re-export get_db for convenience
get_db = _get_db


def get_current_user_id(request: Request) -> str:
    """
    Acting user id from the signed session cookie (set by /api/v1/auth/login)

    Raises:
        HTTPException(401): not logged in

    Usage:
        @router.get("/boards")
        def list_boards(user_id: str = Depends(get_current_user_id)):
            ...
    """
    user_id = request.session.get("user_id")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated"
        )
    return str(user_id)


def get_tx_timeout_ms() -> int:
    """Deadline handed to every mutating use case."""
    return get_settings().TX_TIMEOUT_MS
