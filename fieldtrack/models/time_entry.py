from datetime import datetime

from sqlalchemy import JSON, Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text

from fieldtrack.database import Base


class TimeEntry(Base):
    __tablename__ = "time_entries"

    id = Column(String, primary_key=True, index=True)

    job_id = Column(Integer, ForeignKey("jobs.id"), nullable=False, index=True)
    # NULL for plain clock-in/out entries
    component_id = Column(Integer, ForeignKey("components.id"), nullable=True, index=True)
    user_id = Column(String, nullable=False, index=True)

    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=True)

    total_hours = Column(Float, nullable=False, default=0.0)
    crew_count = Column(Integer, nullable=False, default=1)

    is_manual = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=False)

    notes = Column(Text, nullable=True)
    worker_names = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
