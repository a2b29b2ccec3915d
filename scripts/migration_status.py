#!/usr/bin/env python3
"""Show the data-migration ledger and current label / milestone counts."""

import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from teamboard import create_app
from teamboard.services.migrations.ledger import latest_runs
from teamboard.services.store import open_store
from teamboard.models.card import card_labels
from teamboard.models.project import Milestone, Project
from teamboard.models.team import Label, Team


def collect_status(store) -> dict:
    return {
        "counts": {
            "teams": store.count(Team),
            "labels": store.count(Label),
            "card_label_links": int(store.session.query(card_labels).count()),
            "projects": store.count(Project),
            "milestones": store.count(Milestone),
        },
        "runs": [run.to_dict() for run in latest_runs(store)],
    }


def main() -> int:
    app = create_app(os.getenv("APP_ENV", "development"))
    with open_store(app) as store:
        status = collect_status(store)

    for table, count in status["counts"].items():
        print(f"    {table:.<30} {count}")
    print()
    if not status["runs"]:
        print("    no data migrations recorded")
    for run in status["runs"]:
        print(
            f"    #{run['id']} {run['name']:<12} {run['status']:<8} "
            f"created={run['created']} reused={run['reused']} failed={run['failed']} "
            f"skipped_parents={run['skipped_parents']} at={run['finished_at']}"
        )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
