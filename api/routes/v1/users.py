"""
api/routes/v1/users.py -- User listing.

Routes:
  GET /api/v1/users?page=&page_size=  -- paginated user list (requires session)

Out-of-range paging parameters are normalized rather than rejected:
page < 1 becomes 1; page_size outside 1..100 becomes 20. A page far past
the end of the table is an empty page, never an error.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from api.models import PaginatedUsersResponse, UserResponse
from auth.dependencies import get_session
from auth.models import Admitted
from auth.store import UserStore

router = APIRouter()

_DEFAULT_PAGE_SIZE = 20
_MAX_PAGE_SIZE = 100
# Offsets past this return an empty page; SQLite cannot bind arbitrarily large ints.
_MAX_OFFSET = 2**31 - 1


@router.get("/users", response_model=PaginatedUsersResponse)
def list_users(
    request: Request,
    page: int = 1,
    page_size: int = _DEFAULT_PAGE_SIZE,
    session: Admitted = Depends(get_session),
) -> PaginatedUsersResponse:
    if page < 1:
        page = 1
    if page_size < 1 or page_size > _MAX_PAGE_SIZE:
        page_size = _DEFAULT_PAGE_SIZE

    user_store: UserStore = request.app.state.user_store
    users = user_store.list_users(limit=page_size, offset=min((page - 1) * page_size, _MAX_OFFSET))
    total = user_store.count_users()
    return PaginatedUsersResponse(
        data=[UserResponse.from_user(u) for u in users],
        page=page,
        page_size=page_size,
        total=total,
        total_pages=(total + page_size - 1) // page_size,
    )
