"""
Script to create (or promote) an admin account.

Admin accounts can't be created through /auth/signup, which only registers
candidates.

Run this script from the project root:
    python create_admin.py admin@company.com
"""

import getpass
import sys

from app.core.database import SessionLocal, init_db
from app.core.security import get_password_hash
from app.models.user import User, UserRole


def create_admin(email: str, password: str) -> None:
    """Create an admin user, or promote and re-password an existing one."""
    init_db()
    db = SessionLocal()

    try:
        user = db.query(User).filter(User.email == email).first()
        if user:
            print(f"User {email} already exists (role: {user.role.value}), promoting to admin")
            user.role = UserRole.ADMIN
            user.hashed_password = get_password_hash(password)
        else:
            user = User(email=email, hashed_password=get_password_hash(password), role=UserRole.ADMIN)
            db.add(user)

        db.commit()
        print(f"✓ Admin account ready: {email}")

    except Exception as e:
        db.rollback()
        print(f"✗ Error creating admin: {e}")
        print("Database changes have been rolled back.")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("Usage: python create_admin.py <email>")
        sys.exit(1)

    admin_password = getpass.getpass("Password (min 8 characters): ")
    if len(admin_password) < 8:
        print("Password must be at least 8 characters.")
        sys.exit(1)

    create_admin(sys.argv[1], admin_password)
