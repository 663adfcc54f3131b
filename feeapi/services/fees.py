import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable

from feeapi.core.clock import as_utc, utcnow
from feeapi.core.coins import validate_coin_code
from feeapi.models.fee_estimate import FeeEstimate
from feeapi.services.cryptoapi import CryptoAPIError

logger = logging.getLogger(__name__)


class UpstreamError(Exception):
    """The fee provider failed or could not resolve the requested coin."""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


@dataclass(frozen=True)
class UseCached:
    record: FeeEstimate


@dataclass(frozen=True)
class Refresh:
    pass


def evaluate_cached(existing: FeeEstimate | None, now: datetime, ttl: timedelta) -> UseCached | Refresh:
    if existing is None or existing.timestamp is None:
        return Refresh()
    if now - as_utc(existing.timestamp) <= ttl:
        return UseCached(existing)
    return Refresh()


class FeeEstimateService:
    """Read-through cache in front of the fee provider.

    ``store`` needs ``find_one``/``find_all``/``upsert`` coroutines and
    ``provider`` a ``fetch_fee(code)`` coroutine; see
    ``feeapi.services.fee_store`` and ``feeapi.services.cryptoapi``.
    """

    def __init__(
        self,
        store,
        provider,
        ttl: timedelta,
        timeout: float | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.provider = provider
        self.ttl = ttl
        self.timeout = timeout
        self.clock = clock

    async def get_estimate(self, code: str) -> FeeEstimate:
        validate_coin_code(code)

        existing = await self.store.find_one(code)
        decision = evaluate_cached(existing, self.clock(), self.ttl)
        if isinstance(decision, UseCached):
            logger.debug(f"Serving cached fee estimate for {code}")
            return decision.record

        fee_data = await self._fetch(code)
        record = await self.store.upsert(code, fee_data, self.clock())
        logger.info(f"Refreshed fee estimate for {code}")
        return record

    async def find_all(self) -> list[FeeEstimate]:
        return await self.store.find_all()

    async def find_one(self, code: str) -> FeeEstimate | None:
        return await self.store.find_one(code)

    async def _fetch(self, code: str):
        try:
            fee_data = await asyncio.wait_for(self.provider.fetch_fee(code), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"Fee provider timed out for {code}")
            raise UpstreamError(code, "Fee provider timed out") from e
        except (CryptoAPIError, OSError) as e:
            logger.error(f"Fee provider failed for {code}: {e}")
            raise UpstreamError(code, str(e)) from e

        if not isinstance(fee_data, Mapping):
            logger.error(f"Fee provider returned malformed data for {code}: {fee_data!r}")
            raise UpstreamError(code, "Malformed fee data from provider")
        return dict(fee_data)
