# storeit/platform/account.py
import datetime
import logging
import uuid
from typing import Optional

import jwt
from sqlmodel import Session, select

from .. import config
from ..errors import OtpDispatchError, UnauthenticatedError
from ..models import Account as AccountModel, OTP, SessionModel, as_utc, utcnow
from ..utils.mailer import send_otp_email_sendgrid
from ..utils.tokens import create_token, generate_otp_code, verify_token
from .databases import commit

logger = logging.getLogger(__name__)


class Account:
    """Accounts, email OTP tokens and sessions.

    ``secret`` is the session secret of the caller; it is only needed for
    the session-scoped calls (``get`` and ``delete_session``).
    """

    def __init__(self, db: Session, secret: Optional[str] = None):
        self.db = db
        self.secret = secret

    def create_email_token(self, user_id: str, email: str) -> dict:
        """Mint an OTP for ``email`` and mail it.

        The account is created with ``user_id`` on first use; later calls for
        the same email keep the existing account id.
        """
        account = self.db.exec(select(AccountModel).where(AccountModel.email == email)).first()
        if account is None:
            account = AccountModel(id=user_id, email=email)
            self.db.add(account)
            commit(self.db)
            self.db.refresh(account)
            logger.info("Created account %s for %s", account.id, email)

        code = generate_otp_code()
        expires_at = utcnow() + datetime.timedelta(minutes=config.OTP_EXPIRES_MINUTES)
        self.db.add(OTP(user_id=account.id, code=code, expires_at=expires_at))
        commit(self.db)

        try:
            send_otp_email_sendgrid(email, code)
        except Exception as error:
            raise OtpDispatchError(f"Failed to deliver OTP to {email}") from error

        return {
            "$id": uuid.uuid4().hex,
            "userId": account.id,
            "expire": expires_at.isoformat(),
        }

    def create_session(self, user_id: str, secret: str) -> dict:
        """Exchange an OTP for a session. The OTP is consumed on success."""
        now = utcnow()
        otp = self.db.exec(select(OTP).where(OTP.user_id == user_id, OTP.code == secret)).first()
        if otp is None or as_utc(otp.expires_at) < now:
            raise UnauthenticatedError("Invalid token passed in the request.")

        for pending in self.db.exec(select(OTP).where(OTP.user_id == user_id)).all():
            self.db.delete(pending)

        session_id = uuid.uuid4().hex
        expires_at = now + datetime.timedelta(days=config.SESSION_EXPIRES_DAYS)
        session_secret = create_token(user_id, session_id, expires_at)
        self.db.add(SessionModel(
            id=session_id,
            user_id=user_id,
            secret=session_secret,
            created_at=now,
            expires_at=expires_at,
        ))
        commit(self.db)
        logger.info("Created session %s for account %s", session_id, user_id)

        return {
            "$id": session_id,
            "userId": user_id,
            "secret": session_secret,
            "expire": expires_at.isoformat(),
        }

    def _current_session(self) -> SessionModel:
        if not self.secret:
            raise UnauthenticatedError("No session")

        try:
            verify_token(self.secret)
        except jwt.PyJWTError as error:
            raise UnauthenticatedError("Invalid session") from error

        sess = self.db.exec(select(SessionModel).where(SessionModel.secret == self.secret)).first()
        if not sess:
            raise UnauthenticatedError("Invalid session")

        if as_utc(sess.expires_at) < utcnow():
            raise UnauthenticatedError("Session expired")

        return sess

    def get(self) -> dict:
        sess = self._current_session()
        account = self.db.get(AccountModel, sess.user_id)
        if account is None:
            raise UnauthenticatedError("Account not found")

        return {
            "$id": account.id,
            "email": account.email,
            "$createdAt": as_utc(account.createdAt).isoformat(),
        }

    def delete_session(self) -> None:
        """Delete the caller's own session."""
        target = self._current_session()
        self.db.delete(target)
        commit(self.db)
        logger.info("Deleted session %s for account %s", target.id, target.user_id)
