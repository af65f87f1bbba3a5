"""User repository for database operations."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import FrozenSet, Iterable, List, Optional

from common.logging_config import get_logger
from metadata_service.database import get_db_connection

logger = get_logger(__name__)


@dataclass(frozen=True)
class User:
    user_id: str
    username: str
    created_at: datetime
    roles: FrozenSet[str] = field(default_factory=frozenset)

    def has_role(self, role: str) -> bool:
        return role in self.roles


class UserRepository:
    @staticmethod
    def create_user(
        user_id: str,
        username: str,
        created_at: datetime,
        roles: Iterable[str] = (),
    ) -> User:
        logger.debug(f"Creating user: {username} [user_id={user_id}]")
        role_set = frozenset(roles)

        with get_db_connection() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    "INSERT INTO users (user_id, username, created_at) VALUES (?, ?, ?)",
                    (user_id, username, created_at.isoformat())
                )
                for role in role_set:
                    cursor.execute(
                        "INSERT INTO user_roles (user_id, role) VALUES (?, ?)",
                        (user_id, role)
                    )
                conn.commit()
                logger.info(f"User created successfully: {username} [user_id={user_id}]")
            except Exception as e:
                conn.rollback()
                logger.error(f"Failed to create user {username}: {e}", exc_info=True)
                raise

        return User(user_id=user_id, username=username, created_at=created_at, roles=role_set)

    @staticmethod
    def add_role(user_id: str, role: str) -> None:
        with get_db_connection() as conn:
            conn.execute(
                "INSERT OR IGNORE INTO user_roles (user_id, role) VALUES (?, ?)",
                (user_id, role)
            )
            conn.commit()
        logger.info(f"Granted role {role} [user_id={user_id}]")

    @staticmethod
    def _load_roles(conn, user_id: str) -> FrozenSet[str]:
        cursor = conn.execute("SELECT role FROM user_roles WHERE user_id = ?", (user_id,))
        return frozenset(row["role"] for row in cursor.fetchall())

    @staticmethod
    def get_by_user_id(user_id: str) -> Optional[User]:
        logger.debug(f"Fetching user by user_id: {user_id}")
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT user_id, username, created_at FROM users WHERE user_id = ?",
                (user_id,)
            )
            row = cursor.fetchone()

            if row is None:
                logger.debug(f"User not found [user_id={user_id}]")
                return None

            return User(
                user_id=row["user_id"],
                username=row["username"],
                created_at=datetime.fromisoformat(row["created_at"]),
                roles=UserRepository._load_roles(conn, row["user_id"]),
            )

    @staticmethod
    def exists_by_id(user_id: str) -> bool:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT 1 FROM users WHERE user_id = ?", (user_id,))
            return cursor.fetchone() is not None

    @staticmethod
    def get_all_users() -> List[User]:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT user_id, username, created_at FROM users ORDER BY created_at")
            rows = cursor.fetchall()

            return [
                User(
                    user_id=row["user_id"],
                    username=row["username"],
                    created_at=datetime.fromisoformat(row["created_at"]),
                    roles=UserRepository._load_roles(conn, row["user_id"]),
                )
                for row in rows
            ]
