from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from healthify.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=True, default="")
    is_active = Column(Boolean, default=True, nullable=False)

    # Standing daily target in glasses, copied onto each new daily log
    water_goal = Column(Integer, default=8, nullable=False)

    # Snapshot of today's log; the daily_water_logs table is authoritative
    current_water_date = Column(String, nullable=True)    # YYYY-MM-DD
    current_water_count = Column(Integer, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
