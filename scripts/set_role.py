#!/usr/bin/env python3
"""
Change the role of an account, looked up by id or phone.

Usage:
  python scripts/set_role.py --phone +15550100 --role admin
  python scripts/set_role.py --id 3f2c... --role customer
"""
from __future__ import annotations

import argparse
import sys

from accounts_api.db.models import Account, Role
from accounts_api.repositories.sql_repository import SQLRepository


def main() -> None:
    ap = argparse.ArgumentParser(description="Change an account role")
    target = ap.add_mutually_exclusive_group(required=True)
    target.add_argument("--id", help="Account id")
    target.add_argument("--phone", help="Account phone")
    ap.add_argument("--role", required=True, choices=[r.value for r in Role])
    args = ap.parse_args()

    repo = SQLRepository()
    if args.id:
        account = repo.get_account(args.id.strip())
    else:
        account = repo.get_account_by_phone((args.phone or "").strip())
    if not account:
        raise SystemExit("Account not found")

    updated = repo.update_account_where(Account.id == account.id, role=args.role)
    if not updated:
        raise SystemExit("Account was removed before the update")
    print("OK: role updated")
    print(f"  ID: {updated.id}")
    print(f"  Role: {updated.role}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
