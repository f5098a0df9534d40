# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Delete password-reset requests whose code has expired.

Meant for cron: ``python -m admissions.scripts.purge_expired_resets``.
"""

from __future__ import annotations

import argparse
import secrets

from admissions.container import container
from admissions.infrastructure.db import init_db
from admissions.infrastructure.resilience import call_with_db_retry
from admissions.shared.logging import correlation_scope, logger, setup_logging


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Purge expired password-reset codes")
    parser.add_argument(
        "--init-db",
        action="store_true",
        help="Create missing tables before purging",
    )
    args = parser.parse_args(argv)

    config = container.config
    setup_logging(config.log_level, debug_mode=config.debug_logging, log_file=config.log_file)

    with correlation_scope(f"purge-{secrets.token_hex(4)}"):
        if args.init_db:
            call_with_db_retry(init_db)
        purged = container.purge_expired_resets_use_case.execute()
        logger.info(f"purge_expired_resets: done purged={purged}")

    print(f"Purged {purged} expired password reset request(s)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
