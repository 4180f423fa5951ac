"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, JSON, String, Text

from hotel_ops.infrastructure.database import Base


class NotificationModel(Base):
    """Database representation for notification records."""

    __tablename__ = "notification"
    __table_args__ = (
        Index("ix_notification_recipient_status", "recipient_id", "status"),
        Index("ix_notification_hotel_due", "hotel_id", "scheduled_for", "status"),
        Index(
            "ix_notification_recipient_kind_created",
            "recipient_id",
            "kind",
            "created_at",
        ),
        Index("ix_notification_hotel_created", "hotel_id", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    recipient_id = Column(Integer, ForeignKey("user.id"), nullable=False)
    hotel_id = Column(Integer, nullable=False)
    kind = Column(String(60), nullable=False)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    priority = Column(String(10), nullable=False, default="medium")
    status = Column(String(12), nullable=False, default="pending")
    channels = Column(JSON, nullable=False, default=list)
    scheduled_for = Column(DateTime(), nullable=True)
    created_at = Column(DateTime(), nullable=False)
    sent_at = Column(DateTime(), nullable=True)
    read_at = Column(DateTime(), nullable=True)
    failure_reason = Column(Text, nullable=True)
    channel_results = Column(JSON, nullable=False, default=dict)
    # ``metadata`` is reserved on declarative classes.
    metadata_ = Column("metadata", JSON, nullable=False, default=dict)
    coalesced_count = Column(Integer, nullable=False, default=0)


__all__ = ["NotificationModel"]
