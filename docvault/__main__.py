"""Точка входа ``python -m docvault`` и консольной команды ``docvault``."""

import argparse
import sys
from typing import Optional, Sequence

import uvicorn

from docvault.core.config import get_settings
from docvault.core.security import create_access_token


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="docvault", description="DocVault document store.")
    subparsers = parser.add_subparsers(dest="command")

    serve = subparsers.add_parser("serve", help="Run the HTTP API with uvicorn.")
    serve.add_argument("--host", help="Bind address (defaults to HOST).")
    serve.add_argument("--port", type=int, help="Bind port (defaults to PORT).")
    serve.add_argument("--reload", action="store_true", help="Reload on code changes.")

    token = subparsers.add_parser("token", help="Print a bearer token for a user id.")
    token.add_argument("user_id", help="User UUID placed in the token subject.")

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    settings = get_settings()

    if args.command == "token":
        print(create_access_token({"sub": args.user_id}))
        return 0

    if args.command in (None, "serve"):
        uvicorn.run(
            "docvault.main:app",
            host=getattr(args, "host", None) or settings.host,
            port=getattr(args, "port", None) or settings.port,
            reload=getattr(args, "reload", False),
            log_config=None,
        )
        return 0

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
