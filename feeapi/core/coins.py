from dataclasses import dataclass
import re

@dataclass(frozen=True)
class CoinMeta:
    code: str
    blockchain: str


class InvalidCoinCode(ValueError):
    """Raised when a coin code does not have the expected shape."""


class UnknownCoin(LookupError):
    """Raised when a well-formed coin code is not supported by the provider."""


_re_coin_code = re.compile(r"^[A-Z]{3,6}$")

# Blockchain slugs as used by the Crypto APIs blockchain-data endpoints
COINS: dict[str, CoinMeta] = {
    "BTC":  CoinMeta("BTC",  "bitcoin"),
    "BCH":  CoinMeta("BCH",  "bitcoin-cash"),
    "LTC":  CoinMeta("LTC",  "litecoin"),
    "DOGE": CoinMeta("DOGE", "dogecoin"),
    "DASH": CoinMeta("DASH", "dash"),
    "ZEC":  CoinMeta("ZEC",  "zcash"),
    "ETH":  CoinMeta("ETH",  "ethereum"),
    "ETC":  CoinMeta("ETC",  "ethereum-classic"),
    "BNB":  CoinMeta("BNB",  "binance-smart-chain"),
}

def is_coin_code(value: str) -> bool:
    return bool(_re_coin_code.match(value or ""))

def validate_coin_code(value: str) -> str:
    if not is_coin_code(value):
        raise InvalidCoinCode(f"Invalid coin code: {value!r}")
    return value

def get_coin(code: str) -> CoinMeta:
    meta = COINS.get(code)
    if not meta:
        raise UnknownCoin(f"Unsupported coin: {code}")
    return meta
