"""
Delete refresh tokens and blacklist entries that can no longer authenticate.

Expired refresh tokens and expired blacklist entries are always removed.
Revoked refresh tokens are kept for --days days (audit trail) before removal.

Usage:
    prune-tokens
    prune-tokens --days 30
"""

import argparse
from datetime import timedelta
from core.config import settings
from core.database import SessionLocal
from core.logging_config import setup_logging
from utils.deps import get_auth_service, get_token_codec
from utils.logger import get_logger

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="prune-tokens",
        description="Prune expired and long-revoked authentication tokens."
    )
    parser.add_argument(
        "--days",
        type=int,
        default=settings.PRUNE_REVOKED_AFTER_DAYS,
        help="Delete revoked refresh tokens older than this many days (default: %(default)s)"
    )
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    if args.days < 0:
        print("--days must be zero or positive")
        return 2

    setup_logging(log_level=settings.LOG_LEVEL, log_dir=settings.LOG_DIR)

    db = SessionLocal()
    try:
        service = get_auth_service(db, get_token_codec())
        result = service.prune_tokens(timedelta(days=args.days))
    finally:
        db.close()

    print(f"Deleted {result.expired_refresh_tokens} expired refresh tokens.")
    print(f"Deleted {result.revoked_refresh_tokens} revoked refresh tokens older than {args.days} days.")
    print(f"Deleted {result.blacklisted_tokens} expired blacklisted access tokens.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
