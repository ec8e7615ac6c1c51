"""Utility script to create the first admin account and webhook settings."""

from __future__ import annotations

import argparse
from getpass import getpass

from sqlalchemy.exc import SQLAlchemyError

from mangashelf.application.use_cases.auth import create_user
from mangashelf.domain.errors import DocumentStoreError
from mangashelf.infrastructure.database import SessionLocal, initialize_database
from mangashelf.infrastructure.notifications.webhook_config import (
    ACTIVITY_WEBHOOK_FIELD,
    SETTINGS_COLLECTION,
    WEBHOOKS_DOCUMENT_ID,
)
from mangashelf.infrastructure.repositories import DocumentRepository, RoleRepository


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for user creation."""

    parser = argparse.ArgumentParser(
        description="Create an initial admin account for the mangashelf backend.",
    )
    parser.add_argument(
        "--email",
        default="admin@example.com",
        help="Email address of the account (default: admin@example.com)",
    )
    parser.add_argument(
        "--name",
        default=None,
        help="Display name shown in activity notifications (optional)",
    )
    parser.add_argument(
        "--password",
        default=None,
        help="Account password. Prompted interactively when omitted.",
    )
    parser.add_argument(
        "--member",
        action="store_true",
        help="Create a regular account instead of an admin.",
    )
    parser.add_argument(
        "--activity-webhook",
        default=None,
        help="Store this URL in settings/webhooks as the activity target.",
    )
    return parser.parse_args()


def main() -> None:
    """Create an account using the provided command line arguments."""

    args = parse_args()

    password = args.password or getpass("Password for the new account: ")
    if not password:
        raise SystemExit("No password was provided.")

    initialize_database()

    session = SessionLocal()
    try:
        user = create_user(
            session, email=args.email, password=password, display_name=args.name
        )
    except ValueError as exc:
        session.rollback()
        raise SystemExit(f"Could not create the account: {exc}") from exc
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Could not store the account: {exc}") from exc
    finally:
        session.close()

    documents = DocumentRepository()
    try:
        if not args.member:
            RoleRepository(documents).grant_admin(user.uid)
        if args.activity_webhook:
            documents.set(
                SETTINGS_COLLECTION,
                WEBHOOKS_DOCUMENT_ID,
                {ACTIVITY_WEBHOOK_FIELD: args.activity_webhook},
            )
    except DocumentStoreError as exc:
        raise SystemExit(f"Could not store roles or settings: {exc}") from exc

    print(
        "Account created:\n"
        f"  UID: {user.uid}\n"
        f"  Email: {user.email}\n"
        f"  Name: {user.display_name or '-'}\n"
        f"  Admin: {'no' if args.member else 'yes'}"
    )


if __name__ == "__main__":
    main()
