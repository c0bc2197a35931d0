"""Request dependencies shared by every router.

The upstream auth proxy identifies the caller with the ``X-User-Id`` header and
their role with ``X-User-Role`` (``ADMIN`` or ``USER``); a request without a user
id is a guest. Long-lived collaborators (database, handlers, dispatcher) are
built once by ``app.create_app`` and stored on ``app.state``.
"""

from dataclasses import dataclass

from fastapi import Depends, Header, HTTPException, Request

from shared.database import Database

ADMIN_ROLE = "ADMIN"
# Matches the width of every stored user id column.
USER_ID_MAX_LENGTH = 36


@dataclass(frozen=True)
class Caller:
    user_id: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE


def caller_id(x_user_id: str | None = Header(default=None)) -> str | None:
    if x_user_id is None or not x_user_id.strip():
        return None
    if len(x_user_id.strip()) > USER_ID_MAX_LENGTH:
        raise HTTPException(status_code=401, detail="Invalid user id")
    return x_user_id.strip()


def require_caller(x_user_id: str | None = Header(default=None)) -> str:
    user_id = caller_id(x_user_id)
    if user_id is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    return user_id


def current_caller(
    user_id: str = Depends(require_caller),
    x_user_role: str | None = Header(default=None),
) -> Caller:
    return Caller(user_id=user_id, role=(x_user_role or "").strip().upper())


def require_admin(caller: Caller = Depends(current_caller)) -> Caller:
    if not caller.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return caller


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_state(name: str):
    """Dependency factory returning ``app.state.<name>``."""

    def _dependency(request: Request):
        return getattr(request.app.state, name)

    return _dependency
