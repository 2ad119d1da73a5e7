"""
Create an ADMIN account, or promote an existing account to ADMIN.
Self-registration through the API only ever creates USER accounts.
Usage: python scripts/setup/create_admin.py <email> <password> [name]
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

import argparse
from app.database import SessionLocal, create_tables
from app.services.auth_service import ensure_admin


def main():
    parser = argparse.ArgumentParser(description="Create or promote an administrator account")
    parser.add_argument("email")
    parser.add_argument("password", help="Used only when the account does not exist yet")
    parser.add_argument("name", nargs="?", default=None)
    args = parser.parse_args()

    if len(args.password) < 6:
        parser.error("password must be at least 6 characters")

    create_tables()
    db = SessionLocal()
    try:
        user = ensure_admin(db, args.email, args.password, args.name)
        print(f"Administrator ready: {user.email} (id={user.id})")
    finally:
        db.close()


if __name__ == "__main__":
    main()
