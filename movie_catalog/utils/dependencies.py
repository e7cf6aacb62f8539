from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from movie_catalog.database import get_db
from movie_catalog.utils.security import decode_token
from movie_catalog.utils.roles import has_right
from movie_catalog.models.user import User

# auto_error=False so a missing header is a 401 like a bad token, not a 403
security = HTTPBearer(auto_error=False)


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Please authenticate",
        headers={"WWW-Authenticate": "Bearer"},
    )


# Dependency to get the current authenticated user
async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    if credentials is None:
        raise _unauthorized()

    payload = decode_token(credentials.credentials)
    if payload is None or payload.get("type") != "access":
        raise _unauthorized()

    user_id = payload.get("user_id")
    user = db.query(User).filter(User.id == user_id).first()

    if not user or not user.is_active:
        raise _unauthorized()

    return user


def require_rights(*required_rights: str):
    """
    Dependency factory: authenticate, then check every capability against
    the current user's role.

    Usage:
        @router.post("/", dependencies=[Depends(require_rights("manageMovies"))])
    """
    async def checker(current_user: User = Depends(get_current_user)) -> User:
        if not all(has_right(current_user.role, right) for right in required_rights):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
        return current_user

    return checker
