#storefront/data/models/cart.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, JSON

from storefront.data.database import Base


class StoredStateModel(Base):
    """
    Persisted client state (cart, favorites) as a JSON document per key.
    Keys look like `cart:user:12` or `favorites:session:<token>`.
    """

    __tablename__ = "stored_states"

    id = Column(Integer, primary_key=True)
    key = Column(String(120), nullable=False, unique=True, index=True)
    payload = Column(JSON, nullable=False)

    version = Column(Integer, nullable=False, default=1)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )
