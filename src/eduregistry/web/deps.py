from typing import Annotated, cast

from fastapi import Depends, Request
from fastapi.security import APIKeyCookie, HTTPAuthorizationCredentials, HTTPBearer

from eduregistry.app import App
from eduregistry.core.modules.auth.models import AccessToken
from eduregistry.errors import AuthenticationError

# Security schemes
bearer_scheme = HTTPBearer(auto_error=False)
cookie_scheme = APIKeyCookie(name="access_token", auto_error=False)


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def get_access_token(
    app: Annotated[App, Depends(get_app)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)] = None,
    token_cookie: Annotated[str | None, Depends(cookie_scheme)] = None,
) -> AccessToken:
    """Get and validate access token from Authorization Bearer header or cookie."""

    # Check Bearer token first (preferred)
    if credentials and credentials.scheme == "Bearer":
        access_token = AccessToken(credentials.credentials)
        if app.is_access_token_valid(access_token):
            return access_token

    # Fallback to cookie
    if token_cookie:
        access_token = AccessToken(token_cookie)
        if app.is_access_token_valid(access_token):
            return access_token

    raise AuthenticationError("Not authenticated")


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
AccessTokenDep = Annotated[AccessToken, Depends(get_access_token)]
