"""SQLAlchemy model for housekeeping tasks."""

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, JSON, String

from hotel_ops.infrastructure.database import Base


class HousekeepingTaskModel(Base):
    """Database representation of a housekeeping task."""

    __tablename__ = "housekeeping_task"

    id = Column(Integer, primary_key=True, index=True)
    hotel_id = Column(Integer, nullable=False, index=True)
    room_number = Column(String(20), nullable=False)
    title = Column(String(120), nullable=False)
    task_type = Column(String(30), nullable=False, default="cleaning")
    priority = Column(String(10), nullable=False, default="medium")
    status = Column(String(20), nullable=False, default="pending", index=True)
    assigned_to = Column(Integer, ForeignKey("user.id"), nullable=True)
    created_by = Column(Integer, nullable=True)
    quality_score = Column(Float, nullable=True)
    inventory_consumed = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)


__all__ = ["HousekeepingTaskModel"]
