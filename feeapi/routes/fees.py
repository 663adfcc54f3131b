import logging
from datetime import timedelta

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from feeapi.config import settings
from feeapi.core.coins import InvalidCoinCode
from feeapi.core.responses import err
from feeapi.database import get_db
from feeapi.schemas.fees import FeeEstimateOut
from feeapi.services.cryptoapi import CryptoAPIFeeProvider, get_fee_provider
from feeapi.services.fee_store import FeeStoreError, SQLAlchemyFeeEstimateStore
from feeapi.services.fees import FeeEstimateService, UpstreamError
from feeapi.utils.auth import get_current_client

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/fee-estimate", tags=["Fees"])


def get_fee_store(db: AsyncSession = Depends(get_db)) -> SQLAlchemyFeeEstimateStore:
    return SQLAlchemyFeeEstimateStore(db)


def get_fee_service(
    store: SQLAlchemyFeeEstimateStore = Depends(get_fee_store),
    provider: CryptoAPIFeeProvider = Depends(get_fee_provider),
) -> FeeEstimateService:
    return FeeEstimateService(
        store,
        provider,
        ttl=timedelta(seconds=settings.FEE_ESTIMATE_TTL_SECONDS),
        timeout=settings.FEE_PROVIDER_TIMEOUT_SECONDS * max(settings.FEE_PROVIDER_RETRIES, 1),
    )


@router.get("/{code}", response_model=FeeEstimateOut)
async def get_fee_estimate(
    code: str,
    client_id: str = Depends(get_current_client),
    service: FeeEstimateService = Depends(get_fee_service),
):
    """Return the network fee estimate for a coin, cached for FEE_ESTIMATE_TTL_SECONDS."""
    try:
        return await service.get_estimate(code)
    except InvalidCoinCode as e:
        return err(str(e), code="invalid_coin_code", http_status=422)
    except UpstreamError as e:
        logger.error(f"Fee estimate for {code} failed upstream (client {client_id}): {e.message}")
        return err("Upstream provider error.", code="upstream_error", http_status=500)
    except FeeStoreError as e:
        logger.error(f"Fee estimate for {code} failed in store (client {client_id}): {e}")
        return err("Fee estimate store error.", code="store_error", http_status=500)
    except Exception:
        logger.exception(f"Unexpected error while estimating fee for {code}")
        return err("Unexpected error.", code="internal_error", http_status=500)
