from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from .constants import RecordStatus
from .database import Base
from .shared.datetime_utils import utcnow


class AuditMixin:
    """Base entity fields shared by every table"""

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
    status = Column(String(20), default=RecordStatus.ACTIVE.value, nullable=False, index=True)

    # Ids of the acting users, kept as plain integers for auditing
    created_by = Column(Integer, nullable=True)
    updated_by = Column(Integer, nullable=True)


class Branch(AuditMixin, Base):
    __tablename__ = "branches"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    address = Column(String(500), nullable=True)
    phone = Column(String(20), nullable=True)
    # Pre-order deposit percentage (0-100); null falls back to the configured default
    pre_order_deposit_percentage = Column(Float, nullable=True)

    tables = relationship("DiningTable", back_populates="branch")


class User(AuditMixin, Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=True)
    phone = Column(String(20), nullable=True)
    role = Column(String(30), nullable=False)  # RoleName
    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=True, index=True)

    branch = relationship("Branch", foreign_keys=[branch_id])


class TableType(AuditMixin, Base):
    __tablename__ = "table_types"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    capacity = Column(Integer, nullable=False, default=4)
    deposit = Column(Float, nullable=False, default=0)


class DiningTable(AuditMixin, Base):
    __tablename__ = "dining_tables"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=False, index=True)
    floor_name = Column(String(100), nullable=True)
    table_type_id = Column(Integer, ForeignKey("table_types.id"), nullable=False)
    capacity = Column(Integer, nullable=False)

    branch = relationship("Branch", back_populates="tables")
    table_type = relationship("TableType")


class Notification(AuditMixin, Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    type = Column(String(40), nullable=False)  # NotificationType
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)
