"""
Local helper: run one ingestion pass without the HTTP layer.

Handy for backfills, e.g.
  python -m scripts.run_ingest --start-date 2024-01-01 --end-date 2024-01-31

Uses the same env vars as the function (KEY_VAULT_URL, ACCOUNT_ALIASES, ...).
Exit codes: 0 all accounts ok, 1 partial success, 2 everything failed.
"""

import argparse
import json
import sys
from typing import List, Optional

from functions.fio_ingest.config import get_config
from functions.fio_ingest.errors import AuthenticationError
from functions.fio_ingest.orchestrator import STATUS_OK, STATUS_PARTIAL, run_ingestion


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Pull FIO transactions into Blob Storage.")
    parser.add_argument("--start-date", help="YYYY-MM-DD (defaults to yesterday)")
    parser.add_argument("--end-date", help="YYYY-MM-DD (defaults to yesterday)")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    try:
        status, summary = run_ingestion(get_config(), args.start_date, args.end_date)
    except AuthenticationError as e:
        print(f"ERROR: authentication failed: {e.message}", file=sys.stderr)
        return 2

    print(json.dumps(summary.model_dump(), ensure_ascii=False, indent=2))
    if status == STATUS_OK:
        return 0
    if status == STATUS_PARTIAL:
        return 1
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
