from datetime import datetime

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Text

from fieldtrack.database import Base


class Photo(Base):
    __tablename__ = "photos"

    id = Column(Integer, primary_key=True, index=True)
    time_entry_id = Column(String, ForeignKey("time_entries.id"), nullable=True, index=True)
    component_id = Column(Integer, ForeignKey("components.id"), nullable=True)
    job_id = Column(Integer, ForeignKey("jobs.id"), nullable=False, index=True)
    photo_url = Column(String, nullable=False)
    photo_date = Column(Date, nullable=False)
    uploaded_by = Column(String, nullable=False)
    caption = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
