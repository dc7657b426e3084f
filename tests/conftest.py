import os

# Configure the application before it is imported: in-memory database, no Redis, no e-mail
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CACHE_ENABLED"] = "false"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["RESEND_API_KEY"] = ""
os.environ["DB_LOG_SLOW_QUERIES"] = "false"

from datetime import time, timedelta  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.auth import create_access_token  # noqa: E402
from app.constants import RoleName  # noqa: E402
from app.database import Base, SessionLocal, engine  # noqa: E402
from app.main import app  # noqa: E402
from app.models import Branch, DiningTable, TableType, User  # noqa: E402
from app.models_scheduling import ScheduledShift, Shift, ShiftRequirement  # noqa: E402
from app.security_utils import hash_password  # noqa: E402
from app.shared.datetime_utils import utcnow, week_start  # noqa: E402

PASSWORD = "secret123"
HASHED_PASSWORD = hash_password(PASSWORD)


@pytest.fixture(autouse=True)
def setup_database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db(setup_database):
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def headers_for():
    def _headers(user: User) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user)}"}

    return _headers


@pytest.fixture
def branch(db):
    branch = Branch(name="Central", address="1 Main Street", phone="0901234567")
    db.add(branch)
    db.commit()
    return branch


@pytest.fixture
def other_branch(db):
    branch = Branch(name="Riverside", address="9 River Road")
    db.add(branch)
    db.commit()
    return branch


@pytest.fixture
def make_user(db, branch):
    def _make(username: str, role: RoleName = RoleName.WAITER, user_branch=None, **fields) -> User:
        user = User(
            username=username,
            hashed_password=HASHED_PASSWORD,
            full_name=fields.pop("full_name", username.title()),
            role=role.value,
            branch_id=(user_branch or branch).id,
            **fields,
        )
        db.add(user)
        db.commit()
        return user

    return _make


@pytest.fixture
def manager(make_user):
    return make_user("manager", RoleName.MANAGER)


@pytest.fixture
def waiter(make_user):
    return make_user("anna", RoleName.WAITER, full_name="Anna Nguyen")


@pytest.fixture
def manager_headers(manager, headers_for):
    return headers_for(manager)


@pytest.fixture
def waiter_headers(waiter, headers_for):
    return headers_for(waiter)


@pytest.fixture
def tables(db, branch):
    """Three ACTIVE tables seating 2, 4 and 6 guests"""
    small = TableType(name="Small", capacity=2, deposit=50000)
    large = TableType(name="Large", capacity=6, deposit=100000)
    db.add_all([small, large])
    db.flush()
    rows = [
        DiningTable(name="T1", branch_id=branch.id, table_type_id=small.id, capacity=2, floor_name="Ground"),
        DiningTable(name="T2", branch_id=branch.id, table_type_id=small.id, capacity=4, floor_name="Ground"),
        DiningTable(name="T3", branch_id=branch.id, table_type_id=large.id, capacity=6, floor_name="Terrace"),
    ]
    db.add_all(rows)
    db.commit()
    return rows


@pytest.fixture
def next_monday():
    return week_start(utcnow().date()) + timedelta(days=7)


@pytest.fixture
def make_shift(db, branch):
    def _make(name="Morning", start=time(7), end=time(15), week_days=None, requirements=None, shift_branch=None):
        shift = Shift(
            name=name,
            start_time=start,
            end_time=end,
            week_days=week_days or ["MON", "TUE", "WED", "THU", "FRI", "SAT", "SUN"],
            branch_id=(shift_branch or branch).id,
            requirements=[
                ShiftRequirement(role=role.value, quantity=quantity)
                for role, quantity in (requirements or {RoleName.WAITER: 2}).items()
            ],
        )
        db.add(shift)
        db.commit()
        return shift

    return _make


@pytest.fixture
def schedule(db):
    def _schedule(shift: Shift, on_date) -> ScheduledShift:
        scheduled = ScheduledShift(shift_id=shift.id, branch_id=shift.branch_id, date=on_date)
        db.add(scheduled)
        db.commit()
        return scheduled

    return _schedule
