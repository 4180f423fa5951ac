"""SQLAlchemy model for maintenance tasks."""

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text

from hotel_ops.infrastructure.database import Base


class MaintenanceTaskModel(Base):
    """Database representation of a maintenance task."""

    __tablename__ = "maintenance_task"

    id = Column(Integer, primary_key=True, index=True)
    hotel_id = Column(Integer, nullable=False, index=True)
    room_number = Column(String(20), nullable=True)
    title = Column(String(120), nullable=False)
    issue_type = Column(String(40), nullable=False)
    description = Column(Text, nullable=True)
    priority = Column(String(12), nullable=False, default="medium")
    status = Column(String(20), nullable=False, default="pending", index=True)
    assigned_to = Column(Integer, ForeignKey("user.id"), nullable=True)
    created_by = Column(Integer, nullable=True)
    estimated_cost = Column(Float, nullable=True)
    actual_cost = Column(Float, nullable=True)
    due_date = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    overdue_notified_at = Column(DateTime, nullable=True)


__all__ = ["MaintenanceTaskModel"]
