# storeit/platform/__init__.py
from dataclasses import dataclass

from sqlmodel import Session

from .. import config
from ..errors import UnauthenticatedError
from ..session import SessionContext
from .account import Account
from .databases import Databases
from .query import Query
from .storage import InputFile, Storage

__all__ = [
    "Account",
    "Client",
    "Databases",
    "InputFile",
    "Query",
    "Storage",
    "create_admin_client",
    "create_session_client",
]


@dataclass
class Client:
    databases: Databases
    storage: Storage
    account: Account


def create_admin_client(db: Session) -> Client:
    """Privileged client: no session needed."""
    return Client(
        databases=Databases(db),
        storage=Storage(config.UPLOAD_DIR),
        account=Account(db),
    )


def create_session_client(db: Session, session: SessionContext) -> Client:
    """Client acting as the caller of ``session``."""
    if not session.secret:
        raise UnauthenticatedError("No session")

    return Client(
        databases=Databases(db),
        storage=Storage(config.UPLOAD_DIR),
        account=Account(db, secret=session.secret),
    )
