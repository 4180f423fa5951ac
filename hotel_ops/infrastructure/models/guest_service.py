"""SQLAlchemy model for guest service requests."""

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text

from hotel_ops.infrastructure.database import Base


class GuestServiceModel(Base):
    """Database representation of a guest service request."""

    __tablename__ = "guest_service"

    id = Column(Integer, primary_key=True, index=True)
    hotel_id = Column(Integer, nullable=False, index=True)
    guest_id = Column(Integer, ForeignKey("user.id"), nullable=False)
    room_number = Column(String(20), nullable=True)
    service_type = Column(String(40), nullable=False)
    service_variation = Column(String(80), nullable=True)
    title = Column(String(120), nullable=True)
    description = Column(Text, nullable=True)
    priority = Column(String(10), nullable=False, default="medium")
    status = Column(String(20), nullable=False, default="pending", index=True)
    assigned_to = Column(Integer, ForeignKey("user.id"), nullable=True)
    actual_cost = Column(Float, nullable=True)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    overdue_notified_at = Column(DateTime, nullable=True)


__all__ = ["GuestServiceModel"]
