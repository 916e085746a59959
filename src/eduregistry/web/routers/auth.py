from fastapi import APIRouter, Response
from pydantic import BaseModel, Field

from eduregistry.core.modules.auth.models import Principal, TokenPair, UserType
from eduregistry.web.deps import AccessTokenDep, AppDep
from eduregistry.web.openapi import ErrorResponse

router = APIRouter(tags=["auth"])


class LoginRequest(BaseModel):
    """Authentication request."""

    user_type: UserType = Field(..., description="Account type to authenticate as")
    email: str = Field(..., description="Account email")
    password: str = Field(..., description="Account password")


class RefreshRequest(BaseModel):
    """Token refresh request."""

    refresh_token: str = Field(..., description="Refresh token from a previous login")


def _set_access_cookie(response: Response, tokens: TokenPair) -> None:
    response.set_cookie(
        key="access_token",
        value=tokens.access_token,
        httponly=True,
        samesite="lax",
        secure=False,  # Set to True in production with HTTPS
    )


@router.post(
    "/auth/login",
    summary="Authenticate account",
    description="Authenticate with email and password to receive an access/refresh token pair.",
    operation_id="login",
    responses={
        200: {"description": "Successfully authenticated"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
    },
)
async def login(login_data: LoginRequest, app: AppDep, response: Response) -> TokenPair:
    tokens = await app.login(login_data.user_type, login_data.email, login_data.password)
    _set_access_cookie(response, tokens)
    return tokens


@router.post(
    "/auth/refresh",
    summary="Refresh tokens",
    description="Exchange a valid refresh token for a new token pair.",
    operation_id="refreshTokens",
    responses={
        200: {"description": "New token pair issued"},
        401: {"model": ErrorResponse, "description": "Invalid or revoked refresh token"},
    },
)
async def refresh(refresh_data: RefreshRequest, app: AppDep, response: Response) -> TokenPair:
    tokens = await app.refresh_tokens(refresh_data.refresh_token)
    _set_access_cookie(response, tokens)
    return tokens


@router.post(
    "/auth/logout",
    summary="End session",
    description="Revoke the current refresh token.",
    operation_id="logout",
    status_code=204,
    responses={
        204: {"description": "Successfully logged out"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def logout(app: AppDep, access_token: AccessTokenDep, response: Response) -> None:
    await app.logout(access_token)
    response.delete_cookie("access_token")


@router.get(
    "/auth/me",
    summary="Get current account",
    description="Get the account the access token belongs to.",
    operation_id="getCurrentPrincipal",
    responses={
        200: {"description": "Current account"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def me(app: AppDep, access_token: AccessTokenDep) -> Principal:
    return app.get_current_principal(access_token)
