# storeit/deps.py
from fastapi import Depends, Request
from sqlmodel import Session

from .db import get_session
from .services import ActionContext, Revalidator
from .session import SessionContext


def get_revalidator(request: Request) -> Revalidator:
    return request.app.state.revalidator


def get_action_context(
    request: Request,
    db: Session = Depends(get_session),
    revalidator: Revalidator = Depends(get_revalidator),
) -> ActionContext:
    return ActionContext(
        db=db,
        session=SessionContext.from_request(request),
        revalidator=revalidator,
    )
