"""Command-line interface for publication list tools."""

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path

from .config import RenderConfig
from .exceptions import PublistError
from .export import enrich_bibtex_file
from .loader import load_publications
from .render import ERROR_HTML, inject_html, render_publications
from .stats import publication_stats


def setup_logging(verbosity: int = 0) -> None:
    """Configure logging for the CLI application.

    Args:
        verbosity: Logging verbosity level (0=WARNING, 1=INFO, 2+=DEBUG)
    """
    level = {0: logging.WARNING, 1: logging.INFO}.get(verbosity, logging.DEBUG)
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s:%(lineno)d – %(message)s",
    )


def _load_config(args: argparse.Namespace) -> RenderConfig:
    config = RenderConfig.from_file(Path(args.config)) if args.config else RenderConfig()
    if args.highlight is not None:
        config.highlight = args.highlight
    if args.group_by_year:
        config.group_by_year = True
    if args.no_sort:
        config.sort_by_year = False
    return config


def _write_text(text: str, output: str | None) -> None:
    if output is None:
        sys.stdout.write(text + "\n")
        return
    with open(output, "w", encoding="utf-8") as f:
        f.write(text)


def cmd_render(args: argparse.Namespace) -> None:
    """Render the publication list as HTML."""
    logger = logging.getLogger(__name__)

    try:
        config = _load_config(args)
    except PublistError as e:
        logger.error(f"Config error: {e}")
        sys.exit(1)

    page_path = Path(args.inject) if args.inject else None
    page = None
    if page_path is not None:
        try:
            page = page_path.read_text(encoding="utf-8")
        except OSError as e:
            logger.error(f"Cannot read page {page_path}: {e}")
            sys.exit(1)

    try:
        publications = load_publications(Path(args.source), sort=config.sort_by_year)
    except PublistError as e:
        logger.error(f"Error loading publications: {e}")
        if page is not None and page_path is not None:
            try:
                page_path.write_text(inject_html(page, ERROR_HTML, None, config), encoding="utf-8")
            except (PublistError, OSError) as inject_error:
                logger.error(f"Inject error: {inject_error}")
        sys.exit(1)

    fragment = render_publications(publications, config)

    try:
        if page is not None and page_path is not None:
            page_path.write_text(
                inject_html(page, fragment, len(publications), config), encoding="utf-8"
            )
            logger.info(f"✓ Injected {len(publications)} publications into {page_path}")
        else:
            _write_text(fragment, args.output)
    except (PublistError, OSError) as e:
        logger.error(f"Render error: {e}")
        sys.exit(1)

    sys.exit(0)


def cmd_stats(args: argparse.Namespace) -> None:
    """Print publication counts per year and per type."""
    logger = logging.getLogger(__name__)

    try:
        publications = load_publications(Path(args.source))
    except PublistError as e:
        logger.error(f"Stats error: {e}")
        sys.exit(1)

    stats = publication_stats(publications)
    _write_text(json.dumps(dataclasses.asdict(stats), indent=2, ensure_ascii=False), None)
    sys.exit(0)


def cmd_enrich(args: argparse.Namespace) -> None:
    """Infer missing DOI/URL fields and write the bibliography back."""
    bib_path = Path(args.source)
    output_path = Path(args.output) if args.output else bib_path
    logger = logging.getLogger(__name__)

    try:
        report = enrich_bibtex_file(bib_path, output_path, dry_run=args.dry_run)

        for key, added in report.added.items():
            logger.info(f"  {key}: added {', '.join(added)}")

        if args.dry_run:
            logger.info(f"✓ Dry run completed: {len(report.added)} entries would gain links")
        else:
            logger.info(f"✓ Enriched {len(report.added)} of {report.total_entries} entries")

        sys.exit(0)

    except PublistError as e:
        logger.error(f"Enrich error: {e}")
        sys.exit(1)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="publist",
        description="Render a publication list from a BibTeX or JSON source.",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (use -v for INFO, -vv for DEBUG)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # render subcommand
    render_parser = subparsers.add_parser("render", help="Render the publication list as HTML")
    render_parser.add_argument("source", help="Path to a .bib or .json publication source")
    render_parser.add_argument(
        "-o", "--output", type=str, help="Write the HTML fragment here (default: stdout)"
    )
    render_parser.add_argument(
        "--inject",
        type=str,
        help="HTML page whose publication container and counter are replaced in place",
    )
    render_parser.add_argument("--config", type=str, help="JSON file with render options")
    render_parser.add_argument(
        "--highlight", type=str, help="Bold every author name containing this text"
    )
    render_parser.add_argument(
        "--group-by-year", action="store_true", help="Insert a header before each year"
    )
    render_parser.add_argument(
        "--no-sort", action="store_true", help="Keep source order instead of newest first"
    )
    render_parser.set_defaults(func=cmd_render)

    # stats subcommand
    stats_parser = subparsers.add_parser("stats", help="Count publications per year and type")
    stats_parser.add_argument("source", help="Path to a .bib or .json publication source")
    stats_parser.set_defaults(func=cmd_stats)

    # enrich subcommand
    enrich_parser = subparsers.add_parser(
        "enrich", help="Infer missing DOI/URL fields in a .bib file"
    )
    enrich_parser.add_argument("source", help="Path to the .bib file")
    enrich_parser.add_argument(
        "-o", "--output", type=str, help="Output file path (default: overwrite the source)"
    )
    enrich_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show which entries would gain links without writing",
    )
    enrich_parser.set_defaults(func=cmd_enrich)

    return parser


def main() -> None:
    """Main entry point for the publist CLI."""
    parser = create_parser()
    args = parser.parse_args()

    # Setup logging based on verbosity
    setup_logging(args.verbose)

    # Handle case where no subcommand is provided
    if not hasattr(args, "func"):
        parser.print_help()
        sys.exit(1)

    # Execute the subcommand
    args.func(args)


if __name__ == "__main__":
    main()
