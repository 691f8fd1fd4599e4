"""
Create an account directly in the accounts file (e.g. the first admin). Run from project root:
  python -m tasklist.scripts.create_user USERNAME PASSWORD [User|Admin]
Example:
  python -m tasklist.scripts.create_user admin your-secure-password Admin
"""
import argparse
import sys

from tasklist.core.config import get_settings
from tasklist.core.errors import TaskListError
from tasklist.core.security import PASSWORD_MAX_LEN, USERNAME_MAX_LEN
from tasklist.services.account_store import AccountStore
from tasklist.services.session import parse_role


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a to-do API account without going through /auth/register.")
    parser.add_argument("username", help=f"Username (1-{USERNAME_MAX_LEN} chars, case-sensitive)")
    parser.add_argument("password", help=f"Password (1-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("role", nargs="?", default="User", choices=["User", "Admin"])
    parser.add_argument("--accounts-file", default=None, help="Override ACCOUNTS_FILE")
    args = parser.parse_args(argv)

    username = args.username.strip()
    if not username or len(username) > USERNAME_MAX_LEN:
        print("Invalid username length.", file=sys.stderr)
        return 1
    if not args.password.strip() or len(args.password) > PASSWORD_MAX_LEN:
        print(f"Password must be 1-{PASSWORD_MAX_LEN} characters.", file=sys.stderr)
        return 1

    store = AccountStore(args.accounts_file or get_settings().ACCOUNTS_FILE)
    try:
        account = store.create(username, args.password, parse_role(args.role))
    except TaskListError as e:
        print(f"Could not create user '{username}': {e.message}", file=sys.stderr)
        return 1
    print(f"Created user '{account.username}' with role '{account.role.value}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
