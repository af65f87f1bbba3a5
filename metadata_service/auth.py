"""Request identity resolution.

Authentication happens upstream; by the time a request reaches this
service the caller's user id is carried in a trusted header.
"""

from typing import Optional

from fastapi import HTTPException, Request, status

from metadata_service.config import USER_ID_HEADER
from metadata_service.exceptions import UserNotFoundError
from metadata_service.repositories.user_repository import User
from metadata_service.services.access_service import AccessService


async def get_current_user(request: Request) -> User:
    """
    FastAPI dependency resolving the acting user from the identity header.

    Returns:
        The resolved User

    Raises:
        HTTPException: 401 if the header is missing or names an unknown user
    """
    user_id: Optional[str] = request.headers.get(USER_ID_HEADER)
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Missing {USER_ID_HEADER} header"
        )

    try:
        user = AccessService().resolve_user(user_id.strip())
    except UserNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unknown user"
        )

    request.state.user_id = user.user_id
    return user
