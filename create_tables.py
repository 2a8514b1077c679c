# create_tables.py
import os
import sys

from issuetracker.database import Base, SessionLocal, engine, init_db
from issuetracker.models import User
from issuetracker.utils.security import hash_password


def create_tables(drop_existing: bool = False):
    """Create all tables, optionally dropping the existing ones first"""
    if drop_existing:
        Base.metadata.drop_all(bind=engine)
        print("Dropped existing tables")
    init_db()
    print("All tables created successfully!")


def create_default_admin():
    """Create a default administrator from ADMIN_USERNAME / ADMIN_PASSWORD"""
    username = os.getenv("ADMIN_USERNAME", "admin")
    password = os.getenv("ADMIN_PASSWORD")
    if not password:
        print("ADMIN_PASSWORD not set; skipping default admin")
        return

    db = SessionLocal()
    try:
        if db.query(User).filter(User.username == username).first():
            print(f"User '{username}' already exists")
            return
        db.add(User(
            tenant_id=0,
            username=username,
            email=os.getenv("ADMIN_EMAIL", "admin@example.com"),
            password=hash_password(password),
            user_role="Administrator User",
        ))
        db.commit()
        print(f"Default admin user '{username}' created!")
    finally:
        db.close()


if __name__ == "__main__":
    create_tables(drop_existing="--drop" in sys.argv)
    create_default_admin()
