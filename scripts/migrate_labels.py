#!/usr/bin/env python3
"""
Create the default label set for every team (idempotent).

Card labels used to be a string array on each card; they are now team-owned
``Label`` rows. This seeds each team with the 11 default labels. A label
that already exists for a team is reused, not duplicated.

Usage:
    python scripts/migrate_labels.py              # apply
    python scripts/migrate_labels.py --dry-run    # preview, rolls back

Idempotency:
    Exits without writing when any card is already linked to a label, or
    when the data_migration_runs ledger holds an applied "labels" run.
"""

import argparse
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from teamboard.services.migrations import run_standalone


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Create default labels for every team (idempotent).")
    parser.add_argument("--dry-run", action="store_true", help="Preview only; do not write data")
    args = parser.parse_args(argv)
    return run_standalone("labels", dry_run=args.dry_run)


if __name__ == "__main__":
    raise SystemExit(main())
