"""
Create or reset an admin login.
Run: python -m scripts.create_admin admin@example.com 'StrongPass123'
"""
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import logging

from sqlalchemy.orm import Session

from certportal.core.security import hash_password
from certportal.db.init_db import init_db
from certportal.db.models.user import User, UserRole
from certportal.db.session import SessionLocal

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_admin(db: Session, email: str, password: str) -> User:
    """Create an admin user, or promote and reset the password of an existing one."""
    email = email.strip().lower()
    user = db.query(User).filter(User.email == email).first()

    if user:
        logger.info(f"Found existing user: {email} (ID: {user.id}), resetting as admin")
        user.role = UserRole.ADMIN.value
        user.password_hash = hash_password(password)
        user.student_id = None
    else:
        logger.info(f"Creating new admin: {email}")
        user = User(email=email, password_hash=hash_password(password), role=UserRole.ADMIN.value)
        db.add(user)

    db.commit()
    db.refresh(user)
    return user


if __name__ == "__main__":
    if len(sys.argv) != 3:
        print("Usage: python -m scripts.create_admin <email> <password>")
        sys.exit(2)

    init_db()
    db = SessionLocal()
    try:
        admin = create_admin(db, sys.argv[1], sys.argv[2])
        print(f"\n[SUCCESS] Admin {admin.email} is ready (ID: {admin.id})")
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to create admin: {e}", exc_info=True)
        sys.exit(1)
    finally:
        db.close()
