#!/usr/bin/env python3
"""
Grant (or revoke) the admin role directly in the database.

The API never changes a user's role, so admins are created with this
script.  Every user registered with the given email is updated.

Usage:
    python promote_admin.py --db ./natewerks.db --email admin@example.com
    python promote_admin.py --db ./natewerks.db --email admin@example.com --revoke
"""

import argparse
import os
import sys
from typing import Optional, Sequence

from natewerks_api.app.core.db import USER, DocumentStore
from natewerks_api.app.core.errors import StoreError


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Grant or revoke the admin role for a user.")
    ap.add_argument("--db", required=True, help="Path to SQLite DB file (e.g., ./natewerks.db)")
    ap.add_argument("--email", required=True, help="Email of the user to update")
    ap.add_argument("--revoke", action="store_true", help="Set the role back to 'user'")
    args = ap.parse_args(argv)

    if not os.path.exists(args.db):
        print(f"[!] DB not found: {args.db}", file=sys.stderr)
        return 1

    store = DocumentStore(os.path.abspath(args.db))
    role = "user" if args.revoke else "admin"
    try:
        users = store.find_all(USER, email=args.email)
        if not users:
            print(f"[!] No user found with email: {args.email}", file=sys.stderr)
            return 2
        for user in users:
            user["role"] = role
            store.save(USER, user)
            print(f"[+] User {user['id']} ({args.email}) is now '{role}'")
    except StoreError as exc:
        print(f"[!] Database error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
