"""Per-user metadata document, the service's only persistent aggregate."""
from __future__ import annotations

from sqlalchemy import Column, DateTime, Text, func

from michi.db.base import Base
from michi.db.types import JSONBCompat


class UserMetadata(Base):
    __tablename__ = "user_metadata"

    user_id = Column(Text, primary_key=True)
    # learnerProfile lives here
    public_metadata = Column(JSONBCompat, nullable=False, default=dict)
    # trips, scheduleBlocks and pathways live here
    private_metadata = Column(JSONBCompat, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
