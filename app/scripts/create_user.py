"""
Provision a user (the only way to create an admin). Run from project root:
  python -m app.scripts.create_user EMAIL PASSWORD FULL_NAME [role]
Example:
  python -m app.scripts.create_user admin@example.com your-secure-password "Shop Admin" admin
"""
import argparse
import logging
import sys

from app.core.database import SessionLocal
from app.schemas.auth import Role
from app.services.credential_store import CredentialStore
from app.services.registration import provision_user

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a storefront user or admin.")
    parser.add_argument("email", help="Email (identity key, stored lower-cased)")
    parser.add_argument("password", help="Password (at most 72 bytes UTF-8)")
    parser.add_argument("full_name", help="Display name")
    parser.add_argument("role", nargs="?", default=Role.USER.value, choices=[r.value for r in Role])
    args = parser.parse_args(argv)

    db = SessionLocal()
    try:
        result = provision_user(
            CredentialStore(db),
            args.email,
            args.password,
            args.full_name,
            Role(args.role),
        )
    finally:
        db.close()

    if not result.ok:
        print(result.message, file=sys.stderr)
        return 1
    logger.info("Created user id=%s with role '%s'.", result.user_id, args.role)
    return 0


if __name__ == "__main__":
    sys.exit(main())
