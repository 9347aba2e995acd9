# storeit/utils/tokens.py
import datetime
import secrets

import jwt

from .. import config


def create_token(user_id: str, session_id: str, expires_at: datetime.datetime) -> str:
    payload = {
        "user_id": user_id,
        "session_id": session_id,
        "exp": expires_at,
    }
    token = jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGO)
    return token if isinstance(token, str) else token.decode()


def verify_token(token: str) -> dict:
    return jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGO])


def generate_otp_code() -> str:
    return f"{secrets.randbelow(1_000_000):06d}"
