"""Tests for OTP sign-up, sign-in and sessions."""

import pytest
from sqlmodel import select

from storeit import config
from storeit.errors import OtpDispatchError, PlatformError, UnauthenticatedError
from storeit.models import OTP, SessionModel, User
from storeit.schemas import CreateAccountIn, EmailIn, VerifyOTPIn
from storeit.services import ActionContext, identity
from storeit.session import SessionContext


def test_create_account_is_idempotent_per_email(ctx, db):
    first = identity.create_account(ctx, CreateAccountIn(fullName="Alice", email="a@x.com"))
    second = identity.create_account(ctx, CreateAccountIn(fullName="Alice2", email="a@x.com"))

    assert second == first
    users = db.exec(select(User).where(User.email == "a@x.com")).all()
    assert len(users) == 1
    assert users[0].fullName == "Alice"
    assert users[0].avatar == config.AVATAR_PLACEHOLDER_URL
    # the second call does not mail another code
    assert len(db.exec(select(OTP)).all()) == 1


def test_sign_in_unknown_email(ctx, db):
    result = identity.sign_in(ctx, EmailIn(email="ghost@x.com"))

    assert result == {"accountId": None, "error": "User not found"}
    assert db.exec(select(OTP)).all() == []


def test_sign_in_sends_fresh_otp(ctx, db):
    account_id = identity.create_account(
        ctx, CreateAccountIn(fullName="Alice", email="a@x.com")
    )["accountId"]

    result = identity.sign_in(ctx, EmailIn(email="a@x.com"))

    assert result == {"accountId": account_id}
    assert len(db.exec(select(OTP).where(OTP.user_id == account_id)).all()) == 2


def test_verify_secret_sets_session(ctx, db, otp_code):
    account_id = identity.create_account(
        ctx, CreateAccountIn(fullName="Alice", email="a@x.com")
    )["accountId"]

    result = identity.verify_secret(
        ctx, VerifyOTPIn(accountId=account_id, password=otp_code(account_id))
    )

    sess = db.get(SessionModel, result["sessionId"])
    assert sess is not None
    assert ctx.session.secret == sess.secret
    assert ctx.session.changed
    # the code is single use
    assert db.exec(select(OTP).where(OTP.user_id == account_id)).all() == []


def test_verify_secret_with_wrong_code(ctx):
    account_id = identity.create_account(
        ctx, CreateAccountIn(fullName="Alice", email="a@x.com")
    )["accountId"]

    with pytest.raises(UnauthenticatedError) as exc_info:
        identity.verify_secret(ctx, VerifyOTPIn(accountId=account_id, password="not-it"))

    assert str(exc_info.value) == "Failed to verify OTP"
    assert ctx.session.secret is None


def test_current_user(signed_in):
    caller = signed_in("Alice", "a@x.com")

    user = identity.get_current_user(caller)

    assert user["email"] == "a@x.com"
    assert user["fullName"] == "Alice"


def test_current_user_without_session(ctx):
    assert identity.get_current_user(ctx) is None


def test_current_user_with_bad_secret(db):
    caller = ActionContext(db=db, session=SessionContext(secret="garbage"))

    with pytest.raises(UnauthenticatedError) as exc_info:
        identity.get_current_user(caller)

    assert str(exc_info.value) == "Failed to get current user"


def test_sign_out(signed_in, db):
    caller = signed_in("Alice", "a@x.com")

    assert identity.sign_out(caller) == config.SIGN_IN_PATH

    assert caller.session.secret is None
    assert db.exec(select(SessionModel)).all() == []


def test_sign_out_clears_cookie_when_delete_fails(db):
    caller = ActionContext(db=db, session=SessionContext(secret="garbage"))

    assert identity.sign_out(caller) == config.SIGN_IN_PATH

    assert caller.session.secret is None
    assert caller.session.changed


def test_otp_delivery_failure(ctx, db, monkeypatch):
    def broken_mailer(to_email, code):
        raise ConnectionError("smtp down")

    monkeypatch.setattr("storeit.platform.account.send_otp_email_sendgrid", broken_mailer)

    with pytest.raises(OtpDispatchError) as exc_info:
        identity.create_account(ctx, CreateAccountIn(fullName="Alice", email="a@x.com"))

    # only the fixed message reaches the caller, the detail stays on the chain
    assert str(exc_info.value) == "Failed to create account"
    assert db.exec(select(User)).all() == []


def test_lookup_failure_is_wrapped(ctx, monkeypatch):
    def broken_list(self, collection_id, queries=()):
        raise RuntimeError("db unreachable")

    monkeypatch.setattr("storeit.platform.databases.Databases.list_documents", broken_list)

    with pytest.raises(PlatformError) as exc_info:
        identity.sign_in(ctx, EmailIn(email="a@x.com"))

    assert str(exc_info.value) == "Failed to sign in user"
    assert str(exc_info.value.__cause__) == "Failed to get user by email"
