"""Authentication endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, HTTPException, Request, status

from nutrisnap.api.models import CredentialsRequest
from nutrisnap.api.payloads import session_payload
from nutrisnap.domain.errors import DuplicateUserError, InvalidCredentialsError

if TYPE_CHECKING:
    from nutrisnap.containers import AppContainer

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(body: CredentialsRequest, request: Request) -> dict[str, object]:
    """Create an account and log it in."""
    container: AppContainer = request.app.state.container
    controller = container.session_controller
    try:
        await controller.register(body.username, body.password)
    except DuplicateUserError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail=str(exc)
        ) from exc
    await controller.login(body.username, body.password)
    return session_payload(container.state)


@router.post("/login")
async def login(body: CredentialsRequest, request: Request) -> dict[str, object]:
    """Log in and load the user's meal ledger."""
    container: AppContainer = request.app.state.container
    try:
        await container.session_controller.login(body.username, body.password)
    except InvalidCredentialsError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)
        ) from exc
    return session_payload(container.state)


@router.post("/logout")
async def logout(request: Request) -> dict[str, object]:
    """Log out and drop in-memory meals."""
    container: AppContainer = request.app.state.container
    container.session_controller.logout()
    return session_payload(container.state)
