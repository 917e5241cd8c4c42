from typing import TYPE_CHECKING, Callable, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from cinestream.core.exceptions import UnauthorizedError
from cinestream.core.security import TokenData

if TYPE_CHECKING:
    from cinestream.services.auth_service import AuthService

bearer_scheme = HTTPBearer(auto_error=False)


def make_require_user(get_auth_service: Callable[[], "AuthService"]):
    """Build the dependency that turns an ``Authorization: Bearer`` header into TokenData."""

    async def require_user(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    ) -> TokenData:
        if credentials is None or not credentials.credentials:
            raise UnauthorizedError()
        return get_auth_service().verify_token(credentials.credentials)

    return require_user
