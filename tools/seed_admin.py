"""
Seed script: create the admin user if it does not exist
Usage: python tools/seed_admin.py
Never runs at import time.
"""
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from api.auth import get_password_hash
from config import settings
from database import SessionLocal, init_database
from models import User
from services.rbac_service import ROLE_ADMIN


def seed_admin() -> User:
    """Create the admin account from settings, or return the existing one"""
    db = SessionLocal()
    try:
        email = settings.ADMIN_EMAIL.strip().lower()
        admin = db.query(User).filter(User.email == email).first()
        if admin:
            print(f"Admin user already exists: {email}")
            return admin

        admin = User(
            name="Administrator",
            email=email,
            hashed_password=get_password_hash(settings.ADMIN_PASSWORD),
            role=ROLE_ADMIN,
            email_verified=True,
        )
        db.add(admin)
        db.commit()
        db.refresh(admin)

        print("Admin user created:")
        print(f"   Email: {email}")
        print(f"   Role: {ROLE_ADMIN}")
        return admin
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    print("Seeding admin user...")
    init_database()
    seed_admin()
    print("Seed complete")
