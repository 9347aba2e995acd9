"""Shared fixtures for the StoreIt backend tests."""

import os

# keep the app engine in memory and never talk to SendGrid
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SENDGRID_API_KEY", "")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import Session, create_engine, select  # noqa: E402

from storeit import config  # noqa: E402
from storeit.db import get_session, init_db  # noqa: E402
from storeit.main import app  # noqa: E402
from storeit.models import OTP  # noqa: E402
from storeit.schemas import CreateAccountIn, VerifyOTPIn  # noqa: E402
from storeit.services import ActionContext, Revalidator, identity  # noqa: E402


def _latest_otp(db: Session, account_id: str) -> str:
    otp = db.exec(
        select(OTP).where(OTP.user_id == account_id).order_by(OTP.id.desc())
    ).first()
    assert otp is not None, f"no OTP issued for {account_id}"
    return otp.code


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    """Point the object store at a temporary directory."""
    root = tmp_path / "uploads"
    monkeypatch.setattr(config, "UPLOAD_DIR", str(root))
    monkeypatch.setattr(config, "SENDGRID_API_KEY", None)
    return root


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def ctx(db):
    """Context of an anonymous caller."""
    return ActionContext(db=db)


@pytest.fixture
def signed_in(db):
    """Factory: register a user, verify the OTP and return the caller's context."""

    def _signed_in(full_name: str, email: str) -> ActionContext:
        caller = ActionContext(db=db)
        account_id = identity.create_account(
            caller, CreateAccountIn(fullName=full_name, email=email)
        )["accountId"]
        identity.verify_secret(
            caller, VerifyOTPIn(accountId=account_id, password=_latest_otp(db, account_id))
        )
        return caller

    return _signed_in


@pytest.fixture
def client(engine):
    def override_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_session
    app.state.revalidator = Revalidator()
    # session cookies are Secure, so talk https to the test server
    with TestClient(app, base_url="https://testserver") as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def otp_code(db):
    """Read back the newest OTP mailed to an account."""
    return lambda account_id: _latest_otp(db, account_id)
