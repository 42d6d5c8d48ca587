"""
Administrative helper for the user file.

Usage:
  python -m scripts.users_admin list
  python -m scripts.users_admin delete you@example.com
  python -m scripts.users_admin delete 3f0c...-uuid
"""
from __future__ import annotations

import argparse
import sys

from dotenv import load_dotenv

from core.database import delete_user, get_user_by_email, get_user_by_id, list_users, public_user, resolve_database_path


def cmd_list(_args) -> int:
    users = list_users()
    print(f"Using DB: {resolve_database_path()}", file=sys.stderr)
    if not users:
        print("No users found")
        return 0
    for user in users:
        info = public_user(user)
        pending = " reset-pending" if user.get("reset_token") else ""
        print(
            f"  id={info['id']} "
            f"email={info['email']} "
            f"created={info['created_at']} "
            f"last_login={info['last_login_at']}{pending}"
        )
    return 0


def cmd_delete(args) -> int:
    target = args.user.strip()
    user = get_user_by_email(target) if "@" in target else get_user_by_id(target)
    if not user or not delete_user(user["id"]):
        print(f"No user found for {target}")
        return 1
    print(f"Deleted user id={user['id']} email={user['email']}")
    return 0


def main(argv=None) -> int:
    load_dotenv(override=True)
    parser = argparse.ArgumentParser(description="Inspect or clean up the user file.")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="list all users").set_defaults(func=cmd_list)

    delete = sub.add_parser("delete", help="delete a user by email or id")
    delete.add_argument("user")
    delete.set_defaults(func=cmd_delete)

    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
