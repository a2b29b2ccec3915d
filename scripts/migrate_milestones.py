#!/usr/bin/env python3
"""
Create the default milestone plan for every project that has none (idempotent).

Project milestones used to live in a JSON column on the project; they are
now ``Milestone`` rows ordered by ``Milestone.order``. Each project without
milestones receives four INCOMPLETE milestones due 7, 30, 45 and 60 days
from now. Projects that already have milestones are skipped as a whole.

Usage:
    python scripts/migrate_milestones.py              # apply
    python scripts/migrate_milestones.py --dry-run    # preview, rolls back
"""

import argparse
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from teamboard.services.migrations import run_standalone


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Create default milestones for every project without milestones (idempotent)."
    )
    parser.add_argument("--dry-run", action="store_true", help="Preview only; do not write data")
    args = parser.parse_args(argv)
    return run_standalone("milestones", dry_run=args.dry_run)


if __name__ == "__main__":
    raise SystemExit(main())
