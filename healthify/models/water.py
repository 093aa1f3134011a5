from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from healthify.database import Base


class DailyWaterLog(Base):
    __tablename__ = "daily_water_logs"
    __table_args__ = (UniqueConstraint("user_id", "log_date", name="uq_user_water_log_date"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    log_date = Column(String(10), nullable=False, index=True)  # YYYY-MM-DD
    count = Column(Integer, nullable=False, default=0)
    goal = Column(Integer, nullable=False, default=8)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", backref="water_logs")
