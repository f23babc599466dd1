"""Administrator routes, kept on their own router."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import PlainTextResponse


def admin_only(request: Request) -> None:
    # Stub check: nothing in the app sets this flag, so access is denied
    # unless the dependency is overridden.
    if getattr(request.state, "acl_admin", False) is not True:
        raise HTTPException(status_code=403, detail="Forbidden")


router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(admin_only)])


@router.get("/", response_class=PlainTextResponse)
async def admin_index() -> str:
    return "admin: index"


@router.get("/accounts", response_class=PlainTextResponse)
async def admin_accounts() -> str:
    return "admin: list accounts.."


@router.get("/users/{user_id}", response_class=PlainTextResponse)
async def admin_user(user_id: str) -> str:
    return f"admin: view user id {user_id}"
