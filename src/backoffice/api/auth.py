"""Session endpoints backed by the auth context."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, HTTPException, Request, status

from backoffice.api.models import LoginRequest  # noqa: TC001
from backoffice.errors import ValidationError

if TYPE_CHECKING:
    from backoffice.containers import AppContainer

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login")
async def login(body: LoginRequest, request: Request) -> dict[str, object]:
    """Exchange credentials for a session."""
    container: AppContainer = request.app.state.container
    feedback = await container.shell.login.submit(body.email, body.password)
    if not feedback.ok:
        code = (
            status.HTTP_422_UNPROCESSABLE_CONTENT
            if isinstance(feedback.error, ValidationError)
            else status.HTTP_401_UNAUTHORIZED
        )
        raise HTTPException(status_code=code, detail=feedback.message)
    return {"message": feedback.message, "view": container.shell.current_view}


@router.post("/logout")
async def logout(request: Request) -> dict[str, object]:
    """End the session; always succeeds."""
    container: AppContainer = request.app.state.container
    container.auth.sign_out()
    return {"message": "Sessão terminada.", "view": container.shell.current_view}


@router.get("/session")
async def session(request: Request) -> dict[str, object]:
    """Describe the current auth state."""
    container: AppContainer = request.app.state.container
    current = container.auth.session
    return {
        "authenticated": container.auth.is_authenticated,
        "email": current.email if current else None,
        "view": container.shell.current_view,
    }
