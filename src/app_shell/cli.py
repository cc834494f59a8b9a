import argparse
import getpass
import logging
import sys

from src.adapters.auth.crypto import JWTAuthAdapter
from src.adapters.clock import SystemClock
from src.adapters.sqlite.migrator import SQLiteMigrator
from src.adapters.sqlite.repos import SQLiteUserRepo
from src.api.deps import Settings
from src.components.auth import CreateUserInput, run_create_user
from src.rules.loader import load_rules

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("cli")


def handle_migrate(settings: Settings, args: argparse.Namespace) -> None:
    applied = SQLiteMigrator(settings.db_path).run_migrations()
    if applied:
        print(f"Applied {len(applied)} migration(s): {', '.join(applied)}")
    else:
        print("Database is up to date.")


def handle_create_user(settings: Settings, args: argparse.Namespace) -> None:
    if not settings.rules_path.exists():
        logger.error("Rules file %s not found.", settings.rules_path)
        sys.exit(1)
    rules = load_rules(settings.rules_path)

    # The table has to exist before the first account can be created
    SQLiteMigrator(settings.db_path).run_migrations()

    password = args.password or getpass.getpass("Password: ")
    inp = CreateUserInput(email=args.email, password=password, role=args.role, name=args.name)
    result = run_create_user(
        inp,
        user_repo=SQLiteUserRepo(settings.db_path),
        auth_adapter=JWTAuthAdapter(),
        time=SystemClock(),
        password_min_length=rules.auth.password_min_length,
    )
    if not result.success or result.user is None:
        for error in result.errors:
            logger.error("%s", error.message)
        sys.exit(1)

    print(f"Created {result.user.role} {result.user.email} ({result.user.id})")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Travel Agency CMS CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # migrate
    subparsers.add_parser("migrate", help="Apply pending database migrations")

    # create-user
    user_parser = subparsers.add_parser("create-user", help="Create a back-office account")
    user_parser.add_argument("email", help="Login email")
    user_parser.add_argument("--name", help="Display name (defaults to the email's local part)")
    user_parser.add_argument(
        "--role", default="ADMIN", choices=["ADMIN", "EDITOR", "USER"], help="Account role"
    )
    user_parser.add_argument("--password", help="Password (prompted when omitted)")

    args = parser.parse_args(argv)
    settings = Settings()

    if args.command == "migrate":
        handle_migrate(settings, args)
    elif args.command == "create-user":
        handle_create_user(settings, args)


if __name__ == "__main__":
    main()
