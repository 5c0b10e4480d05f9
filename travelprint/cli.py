"""CLI entry point for event reports.

Usage:
    python -m travelprint.cli report --slug my-event
    python -m travelprint.cli report --rows segments_export.json --output report.json
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from travelprint.contracts.submission import SubmissionWithSegments
from travelprint.persistence.errors import EventNotFoundError
from travelprint.persistence.repositories.event_repo import EventRepository
from travelprint.persistence.repositories.submission_repo import SubmissionRepository
from travelprint.services.aggregation import aggregate, group_rows
from travelprint.services.errors import EmptyResultError

logger = logging.getLogger(__name__)


async def _load_from_store(slug: str) -> list[SubmissionWithSegments]:
    event = await EventRepository().require_by_slug(slug)
    logger.info("Loading submissions for event %s (%s)", event.name, event.id)
    return await SubmissionRepository().list_with_segments(event.id)


def _load_from_rows(path: Path) -> list[SubmissionWithSegments]:
    """Read a JSON array of segment rows, each embedding its ``submission``."""
    logger.info("Reading segment rows: %s", path)
    rows = json.loads(path.read_text(encoding="utf-8"))
    return group_rows(rows)


def build_report(submissions: list[SubmissionWithSegments]) -> dict:
    try:
        result = aggregate(submissions)
    except EmptyResultError:
        return {"status": "no_data", "results": None}
    return {"status": "ok", "results": result.to_report()}


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="travelprint reports")
    sub = parser.add_subparsers(dest="command", required=True)

    report = sub.add_parser("report", help="Aggregate an event's travel footprint")
    source = report.add_mutually_exclusive_group(required=True)
    source.add_argument("--slug", type=str, help="Event slug to read from Firestore")
    source.add_argument("--rows", type=Path, help="JSON export of joined segment rows")
    report.add_argument("--output", type=Path, help="Write the report here instead of stdout")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.slug:
        try:
            submissions = asyncio.run(_load_from_store(args.slug))
        except EventNotFoundError as exc:
            logger.error("%s", exc)
            return 1
    else:
        submissions = _load_from_rows(args.rows)

    payload = json.dumps(build_report(submissions), indent=2, ensure_ascii=False)
    if args.output:
        args.output.write_text(payload + "\n", encoding="utf-8")
        logger.info("Report written to %s", args.output)
    else:
        print(payload)
    return 0


if __name__ == "__main__":
    sys.exit(main())
