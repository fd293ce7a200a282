"""Shared route dependencies."""

from typing import Any, Dict

from fastapi import Depends, HTTPException
from fastapi.security import OAuth2PasswordBearer

from models.database import get_users_collection
from services.auth_service import decode_access_token
from utils.helpers import to_object_id

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")


async def get_current_user(token: str = Depends(oauth2_scheme)) -> Dict[str, Any]:
    """Resolve the bearer token to the stored user document."""
    credentials_exception = HTTPException(
        status_code=401,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    user_id = decode_access_token(token)
    object_id = to_object_id(user_id) if user_id else None
    if object_id is None:
        raise credentials_exception

    user = await get_users_collection().find_one({"_id": object_id})
    if user is None:
        raise credentials_exception
    return user
