# create_tables.py
import argparse

from loandesk.database import Base, SessionLocal, engine
from loandesk import models  # noqa: F401  registers every table on Base.metadata
from loandesk.models.user import User
from loandesk.utils.security import hash_password

DEFAULT_ADMIN = {
    "name": "System Administrator",
    "email": "admin@example.com",
    "password": "admin123",
    "department": "IT",
    "role": "admin",
}

def create_tables(drop: bool = False):
    """Create all tables, optionally dropping them first"""
    if drop:
        Base.metadata.drop_all(bind=engine)
        print("🗑️  Existing tables dropped")
    Base.metadata.create_all(bind=engine)
    print("✅ All tables created successfully!")
    create_default_admin()

def create_default_admin():
    """Create a default admin user"""
    db = SessionLocal()
    try:
        if db.query(User).filter(User.email == DEFAULT_ADMIN["email"]).first():
            print("ℹ️  Admin user already exists")
            return
        db.add(User(
            name=DEFAULT_ADMIN["name"],
            email=DEFAULT_ADMIN["email"],
            hashed_password=hash_password(DEFAULT_ADMIN["password"]),
            department=DEFAULT_ADMIN["department"],
            role=DEFAULT_ADMIN["role"],
        ))
        db.commit()
        print("✅ Default admin user created!")
        print(f"   Email: {DEFAULT_ADMIN['email']}")
        print(f"   Password: {DEFAULT_ADMIN['password']}")
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create LoanDesk database tables")
    parser.add_argument("--drop", action="store_true", help="drop existing tables first")
    args = parser.parse_args()
    create_tables(drop=args.drop)
