# storefront/data/models/record.py
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, JSON, String

from storefront.data.database import Base


class RecordModel(Base):
    """One named record (users, categories, cart, ...) stored as a JSON document."""

    __tablename__ = "records"

    key = Column(String(64), primary_key=True)
    value = Column(JSON, nullable=True)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
