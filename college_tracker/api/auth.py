"""
Caller identity.

Sign-in happens upstream (the identity provider / gateway); requests
arrive with the authenticated user's opaque id in the X-User-Id header.
"""
from typing import Optional

from fastapi import Header, HTTPException


async def get_current_user_id(x_user_id: Optional[str] = Header(None)) -> str:
    """Dependency resolving the calling user's id"""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(
            status_code=401,
            detail="Missing user identity",
        )
    return x_user_id.strip()
