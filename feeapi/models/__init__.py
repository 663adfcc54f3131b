from . import fee_estimate
from .fee_estimate import FeeEstimate

__all__ = [
    "fee_estimate",
    "FeeEstimate",
]
