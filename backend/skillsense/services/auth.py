"""
Caller identity for user-scoped endpoints.

The user is identified by the X-User-Id header set by the upstream gateway.
"""
from typing import Optional

from fastapi import Header, HTTPException, status


async def get_current_user_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    """Return the caller's user ID or reject the request."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-User-Id header",
        )
    return x_user_id.strip()
