"""Staff scheduling models: shift templates, scheduled shifts, assignments and shift leave"""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
    Time,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .constants import RequestStatus, ScheduleLockStatus, ScheduledShiftStatus, ShiftStatus
from .database import Base
from .models import AuditMixin

shift_leave_request_shifts = Table(
    "shift_leave_request_shifts",
    Base.metadata,
    Column("request_id", Integer, ForeignKey("shift_leave_requests.id", ondelete="CASCADE"), primary_key=True),
    Column("shift_id", Integer, ForeignKey("shifts.id"), primary_key=True),
)


class Shift(AuditMixin, Base):
    """Recurring shift template of a branch (e.g. Morning 07:00-15:00, MON-FRI)"""

    __tablename__ = "shifts"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    week_days = Column(JSON, default=list, nullable=False)  # ["MON", "TUE", ...]
    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=False, index=True)

    branch = relationship("Branch")
    requirements = relationship(
        "ShiftRequirement", back_populates="shift", cascade="all, delete-orphan"
    )


class ShiftRequirement(Base):
    __tablename__ = "shift_requirements"

    id = Column(Integer, primary_key=True, index=True)
    shift_id = Column(Integer, ForeignKey("shifts.id", ondelete="CASCADE"), nullable=False)
    role = Column(String(30), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)

    shift = relationship("Shift", back_populates="requirements")


class ScheduledShift(AuditMixin, Base):
    """A shift template placed on a concrete date"""

    __tablename__ = "scheduled_shifts"
    __table_args__ = (UniqueConstraint("shift_id", "date", name="uq_scheduled_shift_date"),)

    id = Column(Integer, primary_key=True, index=True)
    shift_id = Column(Integer, ForeignKey("shifts.id"), nullable=False, index=True)
    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    shift_status = Column(String(20), default=ScheduledShiftStatus.DRAFT.value, nullable=False)
    published_at = Column(DateTime, nullable=True)

    shift = relationship("Shift")
    branch = relationship("Branch")
    staff_shifts = relationship("StaffShift", back_populates="scheduled_shift")


class StaffShift(AuditMixin, Base):
    """Assignment of one employee to one scheduled shift"""

    __tablename__ = "staff_shifts"

    id = Column(Integer, primary_key=True, index=True)
    staff_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    scheduled_shift_id = Column(
        Integer, ForeignKey("scheduled_shifts.id"), nullable=False, index=True
    )
    note = Column(String(500), nullable=True)
    shift_status = Column(String(30), default=ShiftStatus.DRAFT.value, nullable=False)

    staff = relationship("User")
    scheduled_shift = relationship("ScheduledShift", back_populates="staff_shifts")
    feedbacks = relationship("StaffShiftFeedback", back_populates="staff_shift")


class StaffShiftFeedback(AuditMixin, Base):
    """Employee response to a published staff shift"""

    __tablename__ = "staff_shift_feedbacks"

    id = Column(Integer, primary_key=True, index=True)
    staff_shift_id = Column(Integer, ForeignKey("staff_shifts.id"), nullable=False, index=True)
    staff_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    response_status = Column(String(20), default=RequestStatus.PENDING.value, nullable=False)
    reason = Column(Text, nullable=True)
    response_date = Column(DateTime, nullable=True)
    published_date = Column(DateTime, nullable=False)
    deadline = Column(DateTime, nullable=False)

    staff_shift = relationship("StaffShift", back_populates="feedbacks")
    staff = relationship("User")


class ShiftLeaveRequest(AuditMixin, Base):
    __tablename__ = "shift_leave_requests"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    request_status = Column(String(20), default=RequestStatus.PENDING.value, nullable=False)
    reason = Column(String(500), nullable=False)
    manager_note = Column(String(500), nullable=True)
    approved_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    approved_at = Column(DateTime, nullable=True)
    is_manager_added = Column(Boolean, default=False, nullable=False)
    affected_shifts_count = Column(Integer, default=0, nullable=False)

    employee = relationship("User", foreign_keys=[employee_id])
    approved_by = relationship("User", foreign_keys=[approved_by_id])
    requested_shifts = relationship("Shift", secondary=shift_leave_request_shifts)


class ShiftLeaveBalance(AuditMixin, Base):
    __tablename__ = "shift_leave_balances"
    __table_args__ = (UniqueConstraint("user_id", "year", name="uq_shift_leave_balance_year"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    year = Column(Integer, nullable=False)
    total_shifts = Column(Integer, nullable=False)
    used_shifts = Column(Integer, default=0, nullable=False)
    bonus_shifts = Column(Integer, default=0, nullable=False)
    bonus_reason = Column(String(500), nullable=True)

    user = relationship("User")

    @property
    def available_shifts(self) -> int:
        return self.total_shifts + self.bonus_shifts - self.used_shifts


class ScheduleLock(AuditMixin, Base):
    """Freezes a branch's roster between start_date and end_date (inclusive) while LOCKED"""

    __tablename__ = "schedule_locks"

    id = Column(Integer, primary_key=True, index=True)
    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    lock_status = Column(String(20), default=ScheduleLockStatus.LOCKED.value, nullable=False, index=True)
    lock_reason = Column(String(500), nullable=True)
    locked_by_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    locked_at = Column(DateTime, nullable=False)
    unlocked_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    unlocked_at = Column(DateTime, nullable=True)
    unlock_reason = Column(String(500), nullable=True)

    branch = relationship("Branch")
    locked_by = relationship("User", foreign_keys=[locked_by_id])
    unlocked_by = relationship("User", foreign_keys=[unlocked_by_id])


class BranchScheduleConfig(AuditMixin, Base):
    """Per-branch scheduling rules, null limits mean unlimited"""

    __tablename__ = "branch_schedule_configs"

    id = Column(Integer, primary_key=True, index=True)
    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=False, unique=True, index=True)
    max_shifts_per_day = Column(Integer, nullable=True)
    max_shifts_per_week = Column(Integer, nullable=True)
    response_deadline_hours = Column(Integer, nullable=True)
    allow_self_shift_registration = Column(Boolean, default=True, nullable=False)

    branch = relationship("Branch")
