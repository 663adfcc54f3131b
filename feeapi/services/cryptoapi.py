import json
import asyncio
import logging
from http import client as http_client
from typing import Any, Dict

from urllib import request, error

from feeapi.config import settings
from feeapi.core.coins import get_coin, UnknownCoin

logger = logging.getLogger(__name__)


class CryptoAPIError(Exception):
    """Generic error raised when the CryptoAPI request fails."""


class CryptoAPIFeeProvider:
    def __init__(
        self,
        base_url: str,
        api_key: str | None,
        network: str = "mainnet",
        timeout: float = 10,
        retries: int = 3,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.network = network
        self.timeout = timeout
        self.retries = retries

    def fees_url(self, blockchain: str) -> str:
        return f"{self.base_url}/blockchain-data/{blockchain}/{self.network}/mempool/fees"

    async def fetch_fee(self, code: str) -> Dict[str, Any]:
        """Fetch the current mempool fee recommendations for *code*.

        Args:
            code: Coin code (e.g., ``"BTC"``).

        Returns:
            The ``data.item`` object returned by the API, untouched
            (typically ``fast``/``standard``/``slow`` plus ``unit``).

        Raises:
            CryptoAPIError: If the coin is unknown, the API key is missing,
                the API returns an error status code or the response is not
                valid JSON carrying a ``data.item`` object.
            error.URLError: If a network error persists after retries.
        """
        try:
            coin = get_coin(code)
        except UnknownCoin as exc:
            raise CryptoAPIError(str(exc)) from exc
        if not self.api_key:
            raise CryptoAPIError("CRYPTO_API_KEY is not set")

        req = request.Request(
            self.fees_url(coin.blockchain),
            headers={
                "X-API-Key": self.api_key,
                "Content-Type": "application/json",
            },
            method="GET",
        )

        def do_request():
            with request.urlopen(req, timeout=self.timeout) as resp:
                raw = json.loads(resp.read().decode())
            data = raw.get("data") if isinstance(raw, dict) else None
            item = data.get("item") if isinstance(data, dict) else None
            if not isinstance(item, dict):
                raise CryptoAPIError("Unexpected response from fee provider")
            return item

        last_exc = None
        for _ in range(max(self.retries, 1)):
            try:
                return await asyncio.to_thread(do_request)
            except error.HTTPError as exc:
                # surface API error details for easier debugging
                body = exc.read().decode(errors="replace")
                try:
                    detail = json.loads(body)
                except json.JSONDecodeError:
                    detail = body or exc.reason
                raise CryptoAPIError(f"HTTP {exc.code}: {detail}") from exc
            except ValueError as exc:
                # JSONDecodeError and UnicodeDecodeError
                raise CryptoAPIError(f"Invalid JSON from fee provider: {exc}") from exc
            except http_client.HTTPException as exc:
                raise CryptoAPIError(f"Malformed HTTP response from fee provider: {exc!r}") from exc
            except (error.URLError, TimeoutError) as exc:
                logger.warning(f"Fee provider unreachable for {code}: {exc}")
                last_exc = exc
                continue
        raise last_exc


def get_fee_provider() -> CryptoAPIFeeProvider:
    return CryptoAPIFeeProvider(
        base_url=settings.CRYPTO_API_BASE_URL,
        api_key=settings.CRYPTO_API_KEY,
        network=settings.CRYPTO_API_NETWORK,
        timeout=settings.FEE_PROVIDER_TIMEOUT_SECONDS,
        retries=settings.FEE_PROVIDER_RETRIES,
    )
