import os

from dotenv import load_dotenv

load_dotenv()

class Settings:
    def __init__(self):
        self.PROJECT_NAME = "Fee Estimate API"
        self.PROJECT_VERSION = "1.0.0"

        # Database
        self.POSTGRES_USER = os.getenv("POSTGRES_USER", "postgres")
        self.POSTGRES_PASSWORD = os.getenv("POSTGRES_PASSWORD", "postgres")
        self.POSTGRES_DB = os.getenv("POSTGRES_DB", "fee_estimates")
        self.POSTGRES_HOST = os.getenv("POSTGRES_HOST", "localhost")
        self.POSTGRES_PORT = os.getenv("POSTGRES_PORT", "5432")

        self.DATABASE_URL = os.getenv("DATABASE_URL") or (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )
        self.DATABASE_ECHO = os.getenv("DATABASE_ECHO", "false").lower() in ("1", "true", "yes")

        # JWT
        self.JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "change-me")
        self.JWT_ALGORITHM = "HS256"
        self.ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24))

        # Crypto APIs (fee provider)
        self.CRYPTO_API_BASE_URL = os.getenv(
            "CRYPTO_API_BASE_URL", "https://rest.cryptoapis.io"
        )
        self.CRYPTO_API_KEY = self._load_secret(os.getenv("CRYPTO_API_KEY"))
        self.CRYPTO_API_NETWORK = os.getenv("CRYPTO_API_NETWORK", "mainnet")

        # Fee estimate cache
        self.FEE_ESTIMATE_TTL_SECONDS = int(os.getenv("FEE_ESTIMATE_TTL_SECONDS", 300))
        self.FEE_PROVIDER_TIMEOUT_SECONDS = float(os.getenv("FEE_PROVIDER_TIMEOUT_SECONDS", 10))
        self.FEE_PROVIDER_RETRIES = int(os.getenv("FEE_PROVIDER_RETRIES", 3))

    @staticmethod
    def _load_secret(value: str | None) -> str | None:
        """Return the contents of *value* if it is a path to a file.

        CRYPTO_API_KEY may contain either the raw key or a path to a file
        holding it (e.g. a mounted docker secret). The file is read and its
        stripped contents returned; anything else is passed through as is.
        """
        if value and os.path.isfile(value):
            with open(value, "r", encoding="utf-8") as fh:
                return fh.read().strip()
        return value

settings = Settings()
