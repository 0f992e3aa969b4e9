"""Print a long-lived access token for an existing user.

Usage:
    python create_token.py cashier@example.com [days]
"""
import sys

from cashier_api.app.core.security import create_access_token

email = sys.argv[1]
days = int(sys.argv[2]) if len(sys.argv) > 2 else 365
print(create_access_token({"sub": email}, expires_delta=days * 24 * 60 * 60))
