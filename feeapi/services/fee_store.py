"""Persistence for cached fee estimates.

Both stores expose the same three coroutines (``find_one``, ``find_all`` and
``upsert``) so the fee service can be handed either one.
"""
import logging
from datetime import datetime
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from feeapi.core.clock import as_utc
from feeapi.models.fee_estimate import FeeEstimate

logger = logging.getLogger(__name__)


class FeeStoreError(Exception):
    """Raised when the underlying store cannot be read or written."""


class SQLAlchemyFeeEstimateStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_one(self, code: str) -> FeeEstimate | None:
        try:
            return await self.db.get(FeeEstimate, code)
        except SQLAlchemyError as e:
            logger.error(f"Failed to read fee estimate for {code}: {e}")
            raise FeeStoreError(f"Failed to read fee estimate for {code}") from e

    async def find_all(self) -> list[FeeEstimate]:
        try:
            result = await self.db.execute(select(FeeEstimate))
        except SQLAlchemyError as e:
            logger.error(f"Failed to list fee estimates: {e}")
            raise FeeStoreError("Failed to list fee estimates") from e
        return list(result.scalars().all())

    async def upsert(self, code: str, fee_data: Any, timestamp: datetime) -> FeeEstimate:
        """Insert or replace the record for *code*.

        A record that already carries a newer timestamp is left untouched, so
        two overlapping refreshes never move a code's timestamp backwards.
        """
        try:
            return await self._write(code, fee_data, timestamp)
        except IntegrityError:
            # a concurrent request inserted the same code first
            await self.db.rollback()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to store fee estimate for {code}: {e}")
            raise FeeStoreError(f"Failed to store fee estimate for {code}") from e

        try:
            return await self._write(code, fee_data, timestamp)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to store fee estimate for {code}: {e}")
            raise FeeStoreError(f"Failed to store fee estimate for {code}") from e

    async def _write(self, code: str, fee_data: Any, timestamp: datetime) -> FeeEstimate:
        record = await self.db.get(FeeEstimate, code)
        if record is None:
            record = FeeEstimate(code=code, fee_data=fee_data, timestamp=timestamp)
            self.db.add(record)
        elif record.timestamp is None or as_utc(record.timestamp) <= as_utc(timestamp):
            record.fee_data = fee_data
            record.timestamp = timestamp
        else:
            return record
        await self.db.commit()
        await self.db.refresh(record)
        return record


class InMemoryFeeEstimateStore:
    """Process-local store, used by the test-suite and for running without a database."""

    def __init__(self):
        self.records: dict[str, FeeEstimate] = {}

    async def find_one(self, code: str) -> FeeEstimate | None:
        return self.records.get(code)

    async def find_all(self) -> list[FeeEstimate]:
        return list(self.records.values())

    async def upsert(self, code: str, fee_data: Any, timestamp: datetime) -> FeeEstimate:
        existing = self.records.get(code)
        if existing is not None and as_utc(existing.timestamp) > as_utc(timestamp):
            return existing
        record = FeeEstimate(code=code, fee_data=fee_data, timestamp=timestamp)
        self.records[code] = record
        return record
