"""Admin login and logout."""

from fastapi import APIRouter, Depends, Form
from fastapi.responses import JSONResponse

from ...config import get_session_cookie_secure
from ...error_handling import AuthenticationError
from ...logging_config import log_user_action
from ...services.auth import ADMIN_USER_ID, SESSION_COOKIE_NAME, SESSION_MAX_AGE, SessionValidator
from ..dependencies import get_validator

router = APIRouter(prefix="/api", tags=["Auth"])


@router.post("/login")
def login(password: str | None = Form(None), validator: SessionValidator = Depends(get_validator)) -> JSONResponse:
    token = validator.issue(password) if password else None
    if token is None:
        raise AuthenticationError("Invalid admin password", code="invalid_password", user_message="Invalid password")

    response = JSONResponse({"success": True})
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        max_age=SESSION_MAX_AGE,
        path="/",
        httponly=True,
        secure=get_session_cookie_secure(),
        samesite="strict",
    )
    return response


@router.post("/logout")
def logout() -> JSONResponse:
    response = JSONResponse({"success": True})
    response.delete_cookie(
        SESSION_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=get_session_cookie_secure(),
        samesite="strict",
    )
    log_user_action(ADMIN_USER_ID, "logout")
    return response
