import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from certportal.core.security import decode_access_token, JWTError
from certportal.db.session import SessionLocal
from certportal.db.models.user import User, UserRole

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")


def get_db():
    """Database session dependency."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user(token: str = Depends(oauth2_scheme)):
    """Get current user email from JWT token."""
    try:
        payload = decode_access_token(token)
        email: str = payload.get("sub")

        if email is None:
            raise HTTPException(status_code=401, detail="Invalid token")

        return email

    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid token")


def get_current_user_obj(
    email: str = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> User:
    """Get current User object from JWT token."""
    user = db.query(User).filter(User.email == email).first()
    if not user:
        raise HTTPException(
            status_code=401,
            detail="User not found"
        )
    return user


def require_role(*roles: UserRole):
    """
    Dependency factory gating an endpoint to the given roles.

    The role is read from the stored user, not from the token, so a
    demoted account loses access without waiting for its token to expire.
    """
    allowed = {role.value for role in roles}

    def checker(user: User = Depends(get_current_user_obj)) -> User:
        if user.role not in allowed:
            logger.warning(f"Access denied: user_id={user.id}, role={user.role}, required={sorted(allowed)}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Not allowed for this role"
            )
        return user

    return checker


require_admin = require_role(UserRole.ADMIN)
require_student = require_role(UserRole.STUDENT)
