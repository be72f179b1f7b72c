"""Recount project and thread counters from the stored threads and responses.

Usage:
    python -m scripts.reconcile_counters [--project PROJECT_ID] [--dry-run]
If --project is omitted, processes every project. With --dry-run the
differences are reported but nothing is written.
Requires FIREBASE_SERVICE_ACCOUNT_KEY or FIREBASE_SERVICE_ACCOUNT_PATH.
"""

import argparse
import asyncio
import sys

from helpfromfounder.application.services import CounterReconciliationService
from helpfromfounder.domain.exceptions import HelpFromFounderException
from helpfromfounder.infrastructure.firebase import (
    close_firebase,
    get_firestore_client,
    init_firebase,
)
from helpfromfounder.infrastructure.firebase.repositories import (
    FirestoreProjectRepository,
    FirestoreResponseRepository,
    FirestoreThreadRepository,
)
from helpfromfounder.shared.telemetry.logging import setup_logging


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--project", help="Only reconcile this project id")
    parser.add_argument(
        "--dry-run", action="store_true", help="Report differences without writing them"
    )
    return parser.parse_args()


async def main() -> None:
    """Reconcile one project or all of them and print what changed."""
    args = _parse_args()
    setup_logging()
    if not init_firebase():
        print("Document store not configured", file=sys.stderr)
        sys.exit(1)
    client = get_firestore_client()
    service = CounterReconciliationService(
        FirestoreProjectRepository(client),
        FirestoreThreadRepository(client),
        FirestoreResponseRepository(client),
    )
    try:
        if args.project:
            results = [await service.reconcile_project(args.project, dry_run=args.dry_run)]
        else:
            results = await service.reconcile_all(dry_run=args.dry_run)
    except HelpFromFounderException as e:
        print(e.message, file=sys.stderr)
        sys.exit(1)
    finally:
        await close_firebase()

    changed = 0
    for result in results:
        if not result.changed:
            continue
        changed += 1
        print(
            f"Project {result.project_id}: "
            f"totalIssues {result.total_issues_before} -> {result.total_issues_after}, "
            f"closedIssues {result.closed_issues_before} -> {result.closed_issues_after}, "
            f"{result.threads_fixed} thread count(s) fixed"
        )
    verb = "would change" if args.dry_run else "changed"
    print(f"Done. {changed} of {len(results)} project(s) {verb}.")


if __name__ == "__main__":
    asyncio.run(main())
