"""Server side sessions stored in MongoDB, keyed by an opaque cookie token."""
import hashlib
import hmac
import logging
import secrets
from datetime import timedelta
from typing import Any, Optional

from fastapi.concurrency import run_in_threadpool

from Database.db import SESSIONS_COLLECTION
from utils import utc_now

from .user import SessionUser

logger = logging.getLogger(__name__)


class SessionStore:
    """
    Create, resolve and destroy sessions.

    The cookie carries a random token; the collection only holds its
    HMAC-SHA256 digest keyed by the session secret. Every successful lookup
    pushes the expiry forward by ``max_age`` seconds.
    """

    def __init__(self, db: Any, secret: str, max_age: int) -> None:
        self._db = db
        self._secret = secret.encode("utf-8")
        self.max_age = max_age

    def _key(self, token: str) -> str:
        return hmac.new(self._secret, token.encode("utf-8"), hashlib.sha256).hexdigest()

    def _collection(self) -> Any:
        return self._db.database[SESSIONS_COLLECTION]

    def _expiry(self):
        return utc_now() + timedelta(seconds=self.max_age)

    async def create(self, user: SessionUser) -> str:
        token = secrets.token_urlsafe(48)
        document = {
            "_id": self._key(token),
            "user": user.model_dump(),
            "expires_at": self._expiry(),
        }
        await run_in_threadpool(self._collection().insert_one, document)
        logger.info("Session created", extra={"user_id": user.id})
        return token

    async def resolve(self, token: Optional[str]) -> Optional[SessionUser]:
        """Return the session user for ``token``, or None if missing or expired."""

        if not token:
            return None
        key = self._key(token)
        record = await run_in_threadpool(
            self._collection().find_one, {"_id": key, "expires_at": {"$gt": utc_now()}}
        )
        if record is None:
            return None
        await run_in_threadpool(
            self._collection().update_one, {"_id": key}, {"$set": {"expires_at": self._expiry()}}
        )
        return SessionUser.model_validate(record["user"])

    async def destroy(self, token: Optional[str]) -> None:
        if not token:
            return
        await run_in_threadpool(self._collection().delete_one, {"_id": self._key(token)})
        logger.info("Session destroyed")
