# storeit/session.py
from dataclasses import dataclass, field
from typing import Optional

from fastapi import Request, Response

from . import config

_UNSET = object()


@dataclass
class SessionContext:
    """The session cookie of one caller, passed explicitly into every action.

    Actions never touch the transport. They record the change they want
    (``set_secret`` / ``clear``) and the HTTP layer writes it to the response
    with ``apply``.
    """

    secret: Optional[str] = None
    _pending: object = field(default=_UNSET, repr=False)

    @classmethod
    def from_request(cls, request: Request) -> "SessionContext":
        return cls(secret=request.cookies.get(config.SESSION_COOKIE_NAME))

    def set_secret(self, secret: str) -> None:
        self.secret = secret
        self._pending = secret

    def clear(self) -> None:
        self.secret = None
        self._pending = None

    @property
    def changed(self) -> bool:
        return self._pending is not _UNSET

    def apply(self, response: Response) -> Response:
        if not self.changed:
            return response

        if self._pending is None:
            response.delete_cookie(
                config.SESSION_COOKIE_NAME,
                path="/",
                secure=True,
                httponly=True,
                samesite="strict",
            )
        else:
            response.set_cookie(
                key=config.SESSION_COOKIE_NAME,
                value=self._pending,
                path="/",
                httponly=True,
                samesite="strict",
                secure=True,
            )
        return response
