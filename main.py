#!/usr/bin/env python3
"""
AuthGate -- command-line token tool.

Issues and inspects tokens with the same Settings and signing key as the API,
without starting a server. Useful for smoke-testing a deployment's SECRET_KEY.

Usage:
  python main.py issue Prerak
  python main.py issue Prerak --json
  python main.py decode <token>

Environment variables:
  SECRET_KEY, FACEBOOK_APP_ID, FACEBOOK_APP_SECRET   required (see core/config.py)
"""

import argparse
import json
import sys
from typing import Optional

from auth.errors import InvalidCredential
from auth.tokens import build_token_issuer
from core.config import ConfigurationMissing, get_settings


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="authgate",
        description="Issue and verify AuthGate bearer tokens.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py issue Prerak
  python main.py issue Prerak --json
  python main.py decode eyJhbGciOiJIUzI1NiIs...
        """,
    )
    sub = parser.add_subparsers(dest="command")

    issue_p = sub.add_parser("issue", help="Issue a token for an accepted username")
    issue_p.add_argument("username", help="Credential to submit")
    issue_p.add_argument("--json", action="store_true", help="Print {user, token} as JSON")

    decode_p = sub.add_parser("decode", help="Verify a token and print its payload")
    decode_p.add_argument("token", help="Compact token string")

    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return 1

    try:
        issuer = build_token_issuer(get_settings())
    except ConfigurationMissing as e:
        print(f"  [!] {e}", file=sys.stderr)
        return 2

    if args.command == "issue":
        try:
            issued = issuer.issue(args.username)
        except InvalidCredential:
            print("  [!] Invalid User", file=sys.stderr)
            return 1
        if args.json:
            print(json.dumps({"user": issued.user, "token": issued.token}))
        else:
            print(issued.token)
            print(f"  expires {issued.expires_at.isoformat()}", file=sys.stderr)
        return 0

    payload = issuer.decode(args.token)
    if payload is None:
        print("  [!] Token is invalid or expired.", file=sys.stderr)
        return 1
    print(json.dumps(payload, indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":
    sys.exit(main())
