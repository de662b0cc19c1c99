from datetime import timedelta

from fastapi import APIRouter, Depends

from core.config import Settings, get_settings
from core.exceptions import AuthorizationError
from schemas.auth import LoginRequest, Token
from services.auth_service import authenticate_admin, create_access_token

router = APIRouter()


@router.post("/admin/login", response_model=Token)
def login_for_access_token(
    form_data: LoginRequest,
    settings: Settings = Depends(get_settings),
):
    if not authenticate_admin(form_data.username, form_data.password, settings):
        raise AuthorizationError("Incorrect username or password")

    access_token = create_access_token(
        data={"sub": settings.ADMIN_USERNAME},
        settings=settings,
        expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )
    return Token(access_token=access_token, token_type="bearer")
