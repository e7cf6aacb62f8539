"""
Create an admin account (admins manage the catalog; registration only
creates user accounts).

Usage:
    python -m movie_catalog.migrations.create_admin_user --email admin@example.com \
        --user-name admin --password 'AdminPass123'
"""

import argparse
import logging

from movie_catalog.database import get_db_session
from movie_catalog.schemas.auth import UserRegister
from movie_catalog.services.auth_service import AuthService
from movie_catalog.utils.roles import ADMIN

logger = logging.getLogger(__name__)


def create_admin(email: str, user_name: str, password: str):
    db = get_db_session()
    try:
        user_data = UserRegister(email=email, user_name=user_name, password=password)
        return AuthService.register_user(db, user_data, role=ADMIN)
    finally:
        db.close()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Create an admin account")
    parser.add_argument("--email", required=True)
    parser.add_argument("--user-name", required=True)
    parser.add_argument("--password", required=True)
    args = parser.parse_args(argv)

    admin = create_admin(args.email, args.user_name, args.password)
    logger.info(f"Admin {admin.user_name} created (id={admin.id})")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    main()
