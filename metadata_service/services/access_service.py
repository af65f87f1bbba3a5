"""Identity resolution and access checks."""

from typing import Optional

from common.logging_config import get_logger
from metadata_service import config
from metadata_service.exceptions import AccessDeniedError, UserNotFoundError
from metadata_service.repositories.user_repository import User, UserRepository

logger = get_logger(__name__)


class AccessService:
    def __init__(self, user_repo=None, admin_role: Optional[str] = None):
        self.user_repo = user_repo or UserRepository()
        self.admin_role = admin_role or config.ADMIN_ROLE

    def resolve_user(self, user_id: str) -> User:
        user = self.user_repo.get_by_user_id(user_id)
        if user is None:
            raise UserNotFoundError(f"User not found with id: {user_id}")
        return user

    def user_exists(self, user_id: str) -> bool:
        return self.user_repo.exists_by_id(user_id)

    def is_privileged(self, user: User) -> bool:
        return user.has_role(self.admin_role)

    def require_ownership(self, user: User, resource_owner_id: str, resource_kind: str = "file") -> None:
        if user.user_id != resource_owner_id:
            logger.warning(
                f"Ownership check failed for {resource_kind} [user_id={user.user_id}] [owner_id={resource_owner_id}]"
            )
            raise AccessDeniedError(f"User {user.user_id} is not the owner of this {resource_kind}")

    def require_privileged(self, user: User) -> None:
        if not self.is_privileged(user):
            logger.warning(f"Privileged operation refused [user_id={user.user_id}]")
            raise AccessDeniedError("Only administrators can perform this action")

    def require_request_owner_consistency(self, requested_owner_id: str, user: User) -> None:
        """
        Reject requests that try to act on behalf of another user.
        """
        if requested_owner_id != user.user_id:
            logger.warning(
                f"Owner mismatch in request [user_id={user.user_id}] [requested_owner_id={requested_owner_id}]"
            )
            raise AccessDeniedError(
                f"You can only create files for yourself. "
                f"Request ownerId: {requested_owner_id}, Current userId: {user.user_id}"
            )
