"""Reservation models: table bookings, pre-orders and the waitlist"""

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

from .constants import BookingStatus, WaitlistStatus
from .database import Base
from .models import AuditMixin


class Booking(AuditMixin, Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=False, index=True)
    time_start = Column(DateTime, nullable=False, index=True)
    time_end = Column(DateTime, nullable=False)
    guest_count = Column(Integer, nullable=False)
    note = Column(Text, nullable=True)
    customer_name = Column(String(100), nullable=False)
    customer_phone = Column(String(20), nullable=False, index=True)
    customer_email = Column(String(255), nullable=True)
    total_deposit = Column(Float, nullable=False, default=0)
    expire_time = Column(DateTime, nullable=True)  # Payment deadline while BOOKED
    booking_status = Column(
        String(20), nullable=False, default=BookingStatus.BOOKED.value, index=True
    )
    payment_type = Column(String(20), nullable=True)  # cash, banking
    deposit_paid_at = Column(DateTime, nullable=True)

    branch = relationship("Branch")
    booked_tables = relationship(
        "BookedTable", back_populates="booking", cascade="all, delete-orphan"
    )
    waitlist_entry = relationship("WaitlistEntry", back_populates="booking", uselist=False)


class BookedTable(Base):
    __tablename__ = "booked_tables"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False)
    table_id = Column(Integer, ForeignKey("dining_tables.id"), nullable=False, index=True)
    deposit = Column(Float, nullable=False, default=0)

    booking = relationship("Booking", back_populates="booked_tables")
    table = relationship("DiningTable")


class PreOrder(AuditMixin, Base):
    __tablename__ = "pre_orders"

    id = Column(Integer, primary_key=True, index=True)
    type = Column(String(20), nullable=False)  # dine-in, takeaway
    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=False, index=True)
    booking_table_id = Column(Integer, ForeignKey("bookings.id"), nullable=True)
    time = Column(DateTime, nullable=False)
    customer_name = Column(String(100), nullable=False)
    customer_phone = Column(String(20), nullable=False)
    customer_email = Column(String(255), nullable=True)
    payment_type = Column(String(20), nullable=False)
    notes = Column(Text, nullable=True)
    total_amount = Column(Float, nullable=False, default=0)
    total_deposit = Column(Float, nullable=False, default=0)
    expire_time = Column(DateTime, nullable=True)
    booking_status = Column(
        String(20), nullable=False, default=BookingStatus.BOOKED.value, index=True
    )

    branch = relationship("Branch")
    booking = relationship("Booking")
    items = relationship("PreOrderItem", back_populates="pre_order", cascade="all, delete-orphan")


class PreOrderItem(Base):
    __tablename__ = "pre_order_items"

    id = Column(Integer, primary_key=True, index=True)
    pre_order_id = Column(
        Integer, ForeignKey("pre_orders.id", ondelete="CASCADE"), nullable=False
    )
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    price = Column(Float, nullable=False)  # Unit price captured when ordering
    note = Column(String(500), nullable=True)

    pre_order = relationship("PreOrder", back_populates="items")
    product = relationship("Product")


class WaitlistEntry(AuditMixin, Base):
    __tablename__ = "waitlist_entries"

    id = Column(Integer, primary_key=True, index=True)
    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=False, index=True)
    preferred_start_time = Column(DateTime, nullable=False)
    preferred_end_time = Column(DateTime, nullable=False)
    duration = Column(Integer, nullable=False)  # hours
    guest_count = Column(Integer, nullable=False)
    customer_name = Column(String(100), nullable=False)
    customer_phone = Column(String(20), nullable=False, index=True)
    customer_email = Column(String(255), nullable=False)
    notes = Column(String(500), nullable=True)
    max_wait_hours = Column(Integer, nullable=False)
    expires_at = Column(DateTime, nullable=False, index=True)
    estimated_wait_time = Column(Integer, nullable=False, default=0)  # minutes
    notification_sent = Column(Boolean, default=False, nullable=False)
    booking_created_id = Column(Integer, ForeignKey("bookings.id"), nullable=True)
    waitlist_status = Column(
        String(20), nullable=False, default=WaitlistStatus.ACTIVE.value, index=True
    )

    branch = relationship("Branch")
    booking = relationship("Booking", back_populates="waitlist_entry")
