"""SQLAlchemy model for the user table."""

from sqlalchemy import Boolean, Column, DateTime, Index, Integer, String, func
from sqlalchemy.sql import expression

from hotel_ops.infrastructure.database import Base


class UserModel(Base):
    """Database representation of a hotel user."""

    __tablename__ = "user"
    __table_args__ = (Index("ix_user_hotel_role", "hotel_id", "role"),)

    id = Column(Integer, primary_key=True, index=True)
    hotel_id = Column(Integer, nullable=False, index=True)
    name = Column(String(80), nullable=False)
    email = Column(String(120), nullable=False, index=True)
    role = Column(String(20), nullable=False)
    department_id = Column(Integer, nullable=True)
    loyalty_tier = Column(String(20), nullable=True)
    last_login = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    is_active = Column(Boolean, nullable=False, default=True)
    deleted = Column(
        Boolean,
        nullable=False,
        default=False,
        server_default=expression.false(),
    )
