from datetime import datetime
from typing import Any
from pydantic import BaseModel

class FeeEstimateOut(BaseModel):
    code: str
    fee_data: dict[str, Any]
    timestamp: datetime

    class Config:
        from_attributes = True
