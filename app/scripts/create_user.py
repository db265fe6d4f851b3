"""
Create a user (e.g. the first admin). Run from project root:
  python -m app.scripts.create_user EMAIL PASSWORD NAME [role]
Example:
  python -m app.scripts.create_user admin@company.com your-secure-password "Site Admin" admin
"""
import argparse
import logging
import sys
from typing import get_args

from pydantic import ValidationError

from app.core.database import session_scope
from app.core.errors import Conflict
from app.schemas.auth import RegisterRequest, Role
from app.services.users import register_user

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create an Entry Management user.")
    parser.add_argument("email", help="Email address (stored lower-cased)")
    parser.add_argument("password", help="Password (6-128 chars)")
    parser.add_argument("name", help="Display name (1-50 chars)")
    parser.add_argument("role", nargs="?", default="user", choices=get_args(Role))
    args = parser.parse_args(argv)

    try:
        body = RegisterRequest(email=args.email, password=args.password, name=args.name)
    except ValidationError as e:
        for err in e.errors():
            print(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}", file=sys.stderr)
        return 1

    with session_scope() as db:
        try:
            user = register_user(db, body, role=args.role)
        except Conflict as e:
            print(e.message, file=sys.stderr)
            return 1
    logger.info("Created user %s with role %s", user.email, user.role)
    return 0


if __name__ == "__main__":
    sys.exit(main())
