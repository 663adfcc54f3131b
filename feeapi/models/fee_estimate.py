from sqlalchemy import Column, String, DateTime, JSON

from feeapi.database import Base


class FeeEstimate(Base):
    __tablename__ = "fee_estimates"

    code = Column(String(16), primary_key=True)
    fee_data = Column(JSON, nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<FeeEstimate code={self.code} timestamp={self.timestamp}>"
