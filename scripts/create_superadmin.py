"""
python -m scripts.create_superadmin --email admin@example.com --password <password>

Credentials can also come from SUPERADMIN_EMAIL / SUPERADMIN_PASSWORD.
"""

import argparse
import os
import sys

sys.path.insert(0, ".")

from dotenv import load_dotenv
load_dotenv()

from app.database import SessionLocal
from app.crud.user import user as user_crud
from app.core.security import get_password_hash
from app.models.user import UserRole


def create_superadmin(email: str, password: str) -> None:
    """Create the superadmin, or reset the password of an existing account and promote it."""
    db = SessionLocal()

    try:
        existing = user_crud.get_by_email(db, email=email)
        if existing:
            existing.hashed_password = get_password_hash(password)
            existing.role = UserRole.superadmin
            existing.company_id = None
            existing.is_active = True
            db.commit()
            print(f"Superadmin {email} already existed: password reset and account re-activated")
        else:
            user_crud.create_user(
                db=db,
                email=email,
                password=password,
                role=UserRole.superadmin,
                first_name="Super",
                last_name="Admin",
            )
            print(f"Superadmin {email} created")

    except Exception as e:
        db.rollback()
        print(f"Error: {e}")
        raise
    finally:
        db.close()


def main() -> None:
    parser = argparse.ArgumentParser(description="Create or reset the superadmin account")
    parser.add_argument("--email", default=os.getenv("SUPERADMIN_EMAIL"))
    parser.add_argument("--password", default=os.getenv("SUPERADMIN_PASSWORD"))
    args = parser.parse_args()

    if not args.email or not args.password:
        parser.error("--email and --password (or SUPERADMIN_EMAIL / SUPERADMIN_PASSWORD) are required")
    if len(args.password) < 6:
        parser.error("password must be at least 6 characters")

    create_superadmin(args.email, args.password)


if __name__ == "__main__":
    main()
