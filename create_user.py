#!/usr/bin/env python3
"""
Provision a cashier user (and, if needed, their organisation).

The organisation is looked up by name and created when it does not
exist yet.  The database path comes from ``DATABASE_URL`` like the
API itself; migrations are applied first so the script also works on
a fresh database.

Usage:
    python create_user.py --organisation Acme --email cashier@acme.test --password "NewStrongPass!234"

If --password is omitted, you will be prompted to enter it securely.
"""

import argparse
import asyncio
import getpass
import sys

from cashier_api.app.core.db import init_db
from cashier_api.app.core.errors import CashierError
from cashier_api.app.services.organisation_service import OrganisationService


async def provision(organisation_name: str, email: str, password: str, full_name: str = None) -> None:
    organisation = await OrganisationService.get_organisation_by_name(organisation_name)
    if organisation is None:
        organisation = await OrganisationService.create_organisation(organisation_name)
        print(f"[+] Created organisation: {organisation.name} (id={organisation.id})")
    user = await OrganisationService.create_user(email, password, organisation.id, full_name)
    print(f"[+] Created user: {user.email} (id={user.id}) in {organisation.name}")


def main():
    ap = argparse.ArgumentParser(description="Create a cashier user.")
    ap.add_argument("--organisation", required=True, help="Organisation name (created if missing)")
    ap.add_argument("--email", required=True, help="User email / login")
    ap.add_argument("--password", help="Password. If omitted, you'll be prompted securely.")
    ap.add_argument("--full-name", help="Optional display name")
    args = ap.parse_args()

    password = args.password or getpass.getpass("Enter password: ")
    if not password:
        print("[!] Empty password is not allowed.", file=sys.stderr)
        sys.exit(1)

    init_db()
    try:
        asyncio.run(provision(args.organisation, args.email, password, args.full_name))
    except CashierError as exc:
        print(f"[!] {exc.message}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
