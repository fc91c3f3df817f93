"""
auth/dependencies.py -- FastAPI Depends() helpers for session authentication.

get_session() runs the SessionGate over the "access" and "refresh" cookies.
The resolved identity is returned as a typed Admitted value rather than
stashed in request state, so handlers receive it as an explicit parameter:

    @router.get("/protected")
    def route(session: Admitted = Depends(get_session)): ...

Rotation write-back: when the gate rotates the access token, the new cookie
is set on the dependency's Response parameter. FastAPI merges those headers
into the response the route returns, so the new access cookie travels with
the response to the very request it authorized. Routes that depend on this
must return data (or a response_model), not a pre-built Response object,
or the merge does not happen.

Layer rule: no imports from api/ or core/.
  auth/dependencies.py may import from fastapi because it is part of the
  FastAPI dependency injection system.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request, Response

from auth.gate import SessionGate
from auth.issuer import ACCESS_COOKIE, REFRESH_COOKIE, apply_directives
from auth.models import Admitted, Rejected, User
from auth.store import UserStore


def _unauthenticated(reason: str) -> HTTPException:
    return HTTPException(
        status_code=401,
        detail={"code": reason, "message": reason},
    )


def get_session(request: Request, response: Response) -> Admitted:
    """Require a valid session. Raises HTTP 401 on rejection.

    Never leaks why a session was rejected: expired and forged tokens
    produce the same body.
    """
    gate: SessionGate = request.app.state.session_gate
    outcome = gate.authenticate(
        request.cookies.get(ACCESS_COOKIE),
        request.cookies.get(REFRESH_COOKIE),
    )
    if isinstance(outcome, Rejected):
        raise _unauthenticated(outcome.reason)
    if outcome.directive is not None:
        apply_directives(response, outcome.directive)
    return outcome


def get_current_user(request: Request, session: Admitted = Depends(get_session)) -> User:
    """Require a valid session whose user still exists. Raises HTTP 401 otherwise."""
    user_store: UserStore = request.app.state.user_store
    user = user_store.get_by_id(session.user_id)
    if user is None:
        raise _unauthenticated(Rejected().reason)
    return user
