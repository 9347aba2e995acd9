# storeit/services/context.py
from dataclasses import dataclass, field

from sqlmodel import Session

from ..session import SessionContext
from .revalidation import Revalidator


@dataclass
class ActionContext:
    """Everything an action needs besides its parameters."""

    db: Session
    session: SessionContext = field(default_factory=SessionContext)
    revalidator: Revalidator = field(default_factory=Revalidator)
