"""
Export the dashboard series as JSON.

Usage:
    accident-analytics-export [--data-dir DIR] [--output FILE] [--indent N]

Writes the same payload the /api/v1/analytics/dashboard endpoint serves,
for static hosting of the dashboard.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .core.config import Settings
from .engines import AnalysisEngineError
from .services.pipeline import build_dashboard, load_dataset
from .sources import DataSourceError

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Export UK accident dashboard data as JSON')
    parser.add_argument(
        '--data-dir',
        type=Path,
        default=None,
        help='Directory holding the accident CSV tables (default: DATA_DIR setting)'
    )
    parser.add_argument(
        '--output',
        type=Path,
        default=None,
        help='Output file (default: stdout)'
    )
    parser.add_argument(
        '--indent',
        type=int,
        default=2,
        help='JSON indentation (default: 2)'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable debug logging'
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    args = parse_args(argv)

    settings = Settings()
    if args.data_dir is not None:
        settings = settings.model_copy(update={"DATA_DIR": args.data_dir})

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        dataset = load_dataset(settings=settings)
        dashboard = build_dashboard(dataset, settings=settings)
    except (DataSourceError, AnalysisEngineError) as e:
        logger.error(f"Error loading data: {e}")
        return 1

    payload = dashboard.model_dump_json(indent=args.indent)
    if args.output is None:
        sys.stdout.write(payload + "\n")
    else:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(payload, encoding="utf-8")
        logger.info(f"✓ Wrote dashboard to {args.output}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
