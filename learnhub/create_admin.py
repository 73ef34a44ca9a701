# learnhub/create_admin.py
"""
Operator tool: create an admin account or promote an existing user.

    python -m learnhub.create_admin alice --email alice@example.com

Runs against DATABASE_URL directly; there is no HTTP route for this.
"""

import argparse
import getpass
import logging
import sys

from .database import SessionLocal, init_db
from .users import get_user_by_username, provision_admin

logger = logging.getLogger("learnhub.create_admin")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Create or promote a learnhub admin user")
    parser.add_argument("username")
    parser.add_argument("--email", default=None)
    parser.add_argument("--password", default=None, help="prompted for when omitted")
    parser.add_argument("--promote-only", action="store_true", help="fail instead of creating a new user")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    args = parse_args(argv)

    password = args.password
    if password is None and not args.promote_only:
        password = getpass.getpass("Password (leave empty to keep the current one): ") or None

    init_db()
    db = SessionLocal()
    try:
        if args.promote_only:
            if not get_user_by_username(db, args.username):
                logger.error("User %s does not exist", args.username)
                return 1
        try:
            user, created = provision_admin(db, args.username, password=password, email=args.email)
        except ValueError as exc:
            logger.error("%s", exc)
            return 1
    finally:
        db.close()

    logger.info("%s admin %s", "Created" if created else "Promoted", user.username)
    return 0


if __name__ == "__main__":
    sys.exit(main())
