import logging

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from pillarlog.core.config import settings
from pillarlog.db.models import User
from pillarlog.db.session import get_db

log = logging.getLogger(__name__)

# Tokens are minted by the auth service; this app only verifies them.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login", auto_error=False)


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


def user_id_from_token(token: str) -> int:
    """Subject of a signed access token, as a user id."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        return int(payload.get("sub"))
    except (JWTError, TypeError, ValueError) as exc:
        log.debug("Rejected access token: %s", exc)
        raise _unauthorized()


async def get_current_user(
    request: Request,
    token: str | None = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """The acting user, from the bearer header or else the access-token cookie."""
    token = token or request.cookies.get(settings.ACCESS_TOKEN_COOKIE_NAME)
    if not token:
        raise _unauthorized()

    user = await db.get(User, user_id_from_token(token))
    if user is None:
        raise _unauthorized()
    return user
