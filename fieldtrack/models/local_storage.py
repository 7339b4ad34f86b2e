from datetime import datetime

from sqlalchemy import Column, DateTime, String, Text

from fieldtrack.database import Base


class LocalStorageEntry(Base):
    """Per-user key/value blobs (the server-side home of device-local state)."""

    __tablename__ = "local_storage"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
