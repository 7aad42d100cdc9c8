"""hostsnap - command-line entry point."""

import logging
import sys

from hostsnap.monitor import SnapshotCollector
from hostsnap.report import render_report


def configure_logging(level: int = logging.WARNING) -> None:
    """Send log records to stderr so they never mix with the report."""
    logging.basicConfig(
        stream=sys.stderr,
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    """Entry point for the hostsnap command."""
    configure_logging()
    collector = SnapshotCollector()
    snapshot = collector.collect()
    sys.stdout.write(render_report(snapshot))


if __name__ == "__main__":
    main()
