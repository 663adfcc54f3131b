import logging

from fastapi import APIRouter

from feeapi.schemas.auth import TokenOut
from feeapi.utils.auth import create_access_token

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["Auth"])

@router.get("/token/{client_id}", response_model=TokenOut)
async def issue_token(client_id: str):
    """Issue a bearer token for *client_id*.

    Wallet clients are not registered individually; any caller may obtain a
    token, which then identifies it on the fee endpoints.
    """
    logger.info(f"Issuing access token for client {client_id}")
    return TokenOut(access_token=create_access_token({"sub": client_id}))
