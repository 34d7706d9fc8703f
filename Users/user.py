"""User model, password hashing and credential checks."""
import logging
from datetime import datetime
from typing import Any, Mapping, Optional

import bcrypt
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pymongo.errors import PyMongoError

from Database.db import USERS_COLLECTION
from errors import AppError, AuthenticationError
from utils import utc_now

logger = logging.getLogger(__name__)

ADMIN_USERNAME = "admin"
ADMIN_ROLE = "admin"
BCRYPT_ROUNDS = 10
# bcrypt only looks at the first 72 bytes of a password
_BCRYPT_MAX_BYTES = 72


class User(BaseModel):
    """Stored account with a salted bcrypt password hash."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[str] = Field(default=None, alias="_id", frozen=True)
    username: str = Field(min_length=1)
    password_hash: str
    role: str = ADMIN_ROLE
    created_at: datetime = Field(default_factory=utc_now, frozen=True)

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, value: Any) -> Optional[str]:
        return None if value is None else str(value)

    def to_document(self) -> dict[str, Any]:
        return {
            "username": self.username,
            "password_hash": self.password_hash,
            "role": self.role,
            "created_at": self.created_at,
        }


class SessionUser(BaseModel):
    """The identity kept in a server side session."""

    id: str
    username: str
    role: str


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    '''Salted one-way hash of ``password``.'''
    return bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("ascii")


def verify_password(password: str, hashed: str) -> bool:
    '''Constant time comparison of ``password`` against a stored bcrypt hash.'''
    try:
        return bcrypt.checkpw(_encode(password), hashed.encode("ascii"))
    except ValueError:
        # malformed stored hash
        return False


def _find_user(db: Any, username: str) -> Optional[Mapping[str, Any]]:
    return db.database[USERS_COLLECTION].find_one({"username": username})


async def authenticate(db: Any, username: str, password: str) -> SessionUser:
    """
    Check credentials against the users collection.

    Args:
        db: BookingDB store client.
        username: submitted user name.
        password: submitted plain text password.

    Returns:
        SessionUser: identity to store in the session.

    Raises:
        AuthenticationError: for an unknown user or a wrong password, with the
            same message in both cases.
    """

    try:
        record = await run_in_threadpool(_find_user, db, username)
    except PyMongoError as exc:
        logger.exception("Failed to look up user")
        raise AppError("Server error") from exc

    if record is None or not await run_in_threadpool(
        verify_password, password, str(record.get("password_hash", ""))
    ):
        logger.warning("Rejected login attempt", extra={"username": username})
        raise AuthenticationError()

    user = User.model_validate(dict(record))
    logger.info("User logged in", extra={"user_id": user.id})
    return SessionUser(id=str(user.id), username=user.username, role=user.role)
