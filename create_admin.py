# create_admin.py
"""
Create (or promote) a dashboard administrator.

    python create_admin.py admin@linkwedding.id "Admin Name"
"""
import getpass
import sys

from sqlmodel import Session, select

from linkwedding.database import engine
from linkwedding.models.user import User
from linkwedding.utils.hash import hash_password


def create_admin(email: str, full_name: str, password: str) -> User:
    email = email.strip().lower()

    with Session(engine) as session:
        user = session.exec(select(User).where(User.email == email)).first()

        if user:
            print(f"User {email} exists, promoting to admin and resetting password")
        else:
            user = User(email=email, password="")

        user.full_name = full_name or user.full_name
        user.password = hash_password(password)
        user.role = "admin"
        user.can_login = True

        session.add(user)
        session.commit()
        session.refresh(user)
        return user


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python create_admin.py <email> [full name]")
        sys.exit(1)

    email = sys.argv[1]
    full_name = sys.argv[2] if len(sys.argv) > 2 else ""

    password = getpass.getpass("Password: ")
    if not password or password != getpass.getpass("Repeat password: "):
        print("Passwords are empty or do not match")
        sys.exit(1)

    user = create_admin(email, full_name, password)
    print(f"Admin ready: {user.email} (id {user.id})")
