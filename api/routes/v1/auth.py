"""
api/routes/v1/auth.py -- Login, registration, logout and identity endpoints.

Routes:
  POST /api/v1/auth/login     -- password login; sets access + refresh cookies
  POST /api/v1/auth/register  -- create account; sets access + refresh cookies
  POST /api/v1/auth/logout    -- clears both cookies; 200
  GET  /api/v1/auth/me        -- current user info (requires session)

Security:
  [H2] POST /login and /register are rate-limited per IP (LOGIN_RATE_LIMIT).
  [C1] authenticate_user() provides timing equalization -- use it, never inline.
  [M5] Cache-Control: no-store on responses that carry fresh credentials.
  Unknown email and wrong password produce the same "bad_credentials" error.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from api.limiter import limiter
from api.models import LoginRequest, MeResponse, MessageResponse, RegisterRequest
from auth.dependencies import get_current_user
from auth.issuer import CredentialIssuer, apply_directives
from auth.models import User
from auth.passwords import RegistrationError, authenticate_user, register_user
from auth.store import UserStore
from core.config import get_settings

# Auth policy:
# - POST /api/v1/auth/login:     public -- login endpoint must be unauthenticated
# - POST /api/v1/auth/register:  public
# - POST /api/v1/auth/logout:    public -- clearing cookies needs no prior session
# - GET  /api/v1/auth/me:        requires session (get_current_user)
router = APIRouter()


def _login_rate_limit() -> str:
    return get_settings().login_rate_limit


def _credentialed_response(
    issuer: CredentialIssuer, user: User, remember: bool, status_code: int = 200
) -> JSONResponse:
    """Mint a credential pair for user and return it as cookies on a JSON response.

    ConfigurationError from the issuer propagates to the app's handler (500).
    """
    pair = issuer.issue_login_pair(user.id, remember)
    resp = JSONResponse(status_code=status_code, content=MeResponse.from_user(user).model_dump())
    apply_directives(resp, *issuer.build_session_directives(pair, remember))
    resp.headers["Cache-Control"] = "no-store"  # [M5]
    return resp


# ---------------------------------------------------------------------------
# Public endpoints
# ---------------------------------------------------------------------------


@limiter.limit(_login_rate_limit)  # [H2] must be ABOVE @router to preserve FastAPI introspection
@router.post("/auth/login", response_model=MeResponse)
def login(request: Request, body: LoginRequest) -> JSONResponse:
    """Authenticate with email and password; set session cookies.

    remember_me selects the long refresh tier for both the refresh token's
    exp and its cookie max-age.
    """
    user_store: UserStore = request.app.state.user_store
    user = authenticate_user(user_store, body.email, body.password)
    if user is None:
        resp = JSONResponse(
            status_code=401,
            content={"error": {"code": "bad_credentials", "message": "Invalid email or password."}},
        )
        resp.headers["Cache-Control"] = "no-store"  # [M5]
        return resp

    return _credentialed_response(request.app.state.credential_issuer, user, body.remember_me)


@limiter.limit(_login_rate_limit)  # [H2]
@router.post("/auth/register", response_model=MeResponse, status_code=201)
def register(request: Request, body: RegisterRequest) -> JSONResponse:
    """Create an account with the default role and start a (non-remembered) session."""
    if body.password != body.password_confirmation:
        raise HTTPException(
            status_code=400,
            detail={"code": "password_mismatch", "message": "Passwords do not match."},
        )

    user_store: UserStore = request.app.state.user_store
    try:
        user = register_user(user_store, body.display_name, body.email, body.password)
    except IntegrityError as exc:
        raise HTTPException(
            status_code=409,
            detail={"code": "conflict", "message": "An account with that email already exists."},
        ) from exc
    except RegistrationError as exc:
        raise HTTPException(
            status_code=500,
            detail={"code": "internal_error", "message": "Failed to create user."},
        ) from exc

    return _credentialed_response(request.app.state.credential_issuer, user, remember=False, status_code=201)


@router.post("/auth/logout", response_model=MessageResponse)
def logout(request: Request) -> JSONResponse:
    """Clear both session cookies, whether or not they held a valid session."""
    issuer: CredentialIssuer = request.app.state.credential_issuer
    resp = JSONResponse(content={"message": "Logged out successfully."})
    apply_directives(resp, *issuer.build_logout_directives())
    return resp


# ---------------------------------------------------------------------------
# Authenticated endpoints
# ---------------------------------------------------------------------------


@router.get("/auth/me", response_model=MeResponse)
def me(current_user: User = Depends(get_current_user)) -> MeResponse:
    """Return identity information for the current user.

    Returns a model (not a Response) so a rotated access cookie set by
    get_session is merged into this response.
    """
    return MeResponse.from_user(current_user)
