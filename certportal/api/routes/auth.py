import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from certportal.api.errors import service_errors
from certportal.core.auth_dependency import get_current_user_obj, get_db, require_admin
from certportal.core.security import hash_password, verify_password, create_access_token
from certportal.db.models.student import Student
from certportal.db.models.user import User, UserRole
from certportal.schemas.auth import TokenResponse, UserCreate, UserResponse
from certportal.services import entity_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


# ✅ OAUTH2 LOGIN (Swagger sends "username", we treat it as email)
@router.post("/login", response_model=TokenResponse)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    email = form_data.username.strip().lower()
    user = db.query(User).filter(User.email == email).first()

    if not user or not verify_password(form_data.password, user.password_hash):
        logger.warning(f"Failed login attempt for {email}")
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token = create_access_token({"sub": user.email, "role": user.role})
    logger.info(f"User logged in: user_id={user.id}, role={user.role}")

    return TokenResponse(access_token=token, role=user.role)


@router.get("/me", response_model=UserResponse)
def me(user: User = Depends(get_current_user_obj)):
    return UserResponse.model_validate(user)


# ✅ ADMIN-ISSUED LOGINS
@router.post("/users", status_code=status.HTTP_201_CREATED, response_model=UserResponse)
def create_user(
    user_data: UserCreate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    email = user_data.email.lower()
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")

    if user_data.role == UserRole.STUDENT and user_data.student_id is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Student logins must reference a student"
        )

    with service_errors(db, "create user"):
        if user_data.student_id is not None:
            entity_service.get_row(db, Student, user_data.student_id)
        user = entity_service.create_row(db, User, {
            "email": email,
            "password_hash": hash_password(user_data.password),
            "role": user_data.role.value,
            "student_id": user_data.student_id,
        })
        logger.info(f"Login created by admin_id={admin.id}: user_id={user.id}, role={user.role}")
        return UserResponse.model_validate(user)
