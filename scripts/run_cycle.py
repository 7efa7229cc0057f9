#!/usr/bin/env python3
"""Run one EconWatch cycle locally or from cron.

Usage:
    python scripts/run_cycle.py

Fetches the feed, reconciles, evaluates thresholds and sends alerts.
Exits 0 on success, 1 on failure.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from econwatch.db.session import SessionLocal
from econwatch.services.cycle import run_cycle

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def main() -> int:
    db = SessionLocal()
    try:
        result = run_cycle(db)
        print(
            f"status={result['status']} "
            f"series_inserted={result['series_inserted']} "
            f"series_updated={result['series_updated']} "
            f"breaches_found={result['breaches_found']} "
            f"notifications_sent={result['notifications_sent']}"
        )
        return 0 if result["status"] == "completed" else 1
    except Exception as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
