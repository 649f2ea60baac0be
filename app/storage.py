"""Persistence adapter for the durable ``UserData`` aggregate."""

from __future__ import annotations

import json
import logging
from datetime import datetime

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from .db_models import UserStateRecord
from .models import UserData

logger = logging.getLogger(__name__)


class UserDataStore:
    """Loads and saves the user state as one JSON document per storage key."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        storage_key: str,
    ):
        self._session_factory = session_factory
        self._storage_key = storage_key

    @property
    def storage_key(self) -> str:
        return self._storage_key

    async def load(self) -> UserData | None:
        """Return the last saved aggregate, or ``None`` when absent or corrupt."""

        try:
            async with self._session_factory() as session:
                record = await session.get(UserStateRecord, self._storage_key)
                if record is None:
                    return None
                payload = record.payload
        except SQLAlchemyError as exc:
            logger.warning(
                "User state under %s could not be read: %s", self._storage_key, exc
            )
            return None

        try:
            return UserData.model_validate(json.loads(payload))
        except (json.JSONDecodeError, TypeError, ValidationError) as exc:
            logger.warning(
                "Discarding unreadable user state stored under %s: %s",
                self._storage_key,
                exc,
            )
            return None

    async def load_or_default(self) -> UserData:
        data = await self.load()
        if data is None:
            return UserData.default()
        return data

    async def save(self, data: UserData) -> None:
        """Persist ``data``, replacing whatever was stored before."""

        payload = data.model_dump_json()
        now = datetime.utcnow()
        async with self._session_factory() as session:
            record = await session.get(UserStateRecord, self._storage_key)
            if record is None:
                session.add(
                    UserStateRecord(
                        storage_key=self._storage_key,
                        payload=payload,
                        created_at=now,
                        updated_at=now,
                    )
                )
            else:
                record.payload = payload
                record.updated_at = now
            await session.commit()
