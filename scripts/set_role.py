import argparse
import sys
import os

# Add parent dir to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fitdesk.infrastructure.database import SessionLocal
from fitdesk.domain.models.user import User

FLAGS = {"admin": "is_admin", "trainer": "is_trainer"}


def set_role(identifier, role, revoke=False):
    db = SessionLocal()
    try:
        column = User.email if "@" in identifier else User.phone_number
        user = db.query(User).filter(column == identifier.strip().lower()).first()
        if user is None:
            print(f"No user found for '{identifier}'.")
            return 1

        setattr(user, FLAGS[role], not revoke)
        db.commit()
        action = "revoked from" if revoke else "granted to"
        print(f"Role '{role}' {action} user {user.id} ({user.name}). Current role: {user.role.value}")
        return 0
    finally:
        db.close()


def main():
    parser = argparse.ArgumentParser(description="Grant or revoke admin/trainer flags on a user.")
    parser.add_argument("identifier", help="phone number (10 digits) or email of the user")
    parser.add_argument("role", choices=sorted(FLAGS))
    parser.add_argument("--revoke", action="store_true", help="remove the role instead of granting it")
    args = parser.parse_args()
    sys.exit(set_role(args.identifier, args.role, args.revoke))


if __name__ == "__main__":
    main()
