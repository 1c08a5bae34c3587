import argparse
import logging
import sys
from typing import List, Optional

from .settings import Settings, is_log_level, load_settings
from .errors import ConfigError, UpstreamFault
from .notion_source import NotionSource
from .cycle_review import is_empty, review_cycle
from .subscriptions import summarize_subscriptions
from .notes import migrate_notes
from .reporting import render_cycle_report, render_subscription_summary

LOGGER = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

def _print_lines(lines: List[str]) -> None:
    for line in lines:
        print(line)

def run_review(cfg: Settings, source, cycle: Optional[str] = None) -> int:
    cycle = cycle or cfg.review.get("default_cycle")
    if not cycle:
        raise ConfigError("No cycle given. Pass --cycle or set review.default_cycle.")
    report = review_cycle(cycle, source)
    if is_empty(report):
        print(f"[CYCLE] No rows found for cycle {cycle!r}")
        return 0
    _print_lines(render_cycle_report(report, cycle))
    if report.skipped:
        LOGGER.info("%d rows skipped in cycle %r; see warnings above", len(report.skipped), cycle)
    return 0

def run_companies(cfg: Settings, source) -> int:
    companies = sorted(set(source.iter_company_names()))
    if not companies:
        print("[COMPANIES] No companies found")
    _print_lines(companies)
    return 0

def run_subscriptions(cfg: Settings, source) -> int:
    summary = summarize_subscriptions(source.iter_subscription_rows())
    LOGGER.info("Summed %d subscriptions", summary.count)
    _print_lines(render_subscription_summary(summary))
    return 0

def run_migrate_notes(cfg: Settings, source, dry_run: bool = False) -> int:
    database_id = cfg.notion.get("notes_database_id") or source.find_database(cfg.notion["notes_database_query"])
    result = migrate_notes(source, database_id, cfg.notion["notes_property"], dry_run=dry_run)
    print(f"[NOTES] Migrated {result.migrated} pages, {len(result.failed)} failed")
    return 1 if result.failed else 0

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Notion job-search tracker reports")
    parser.add_argument("--config", help="Path to config.yaml (defaults to $NT_CONFIG or ./config.yaml)")
    parser.add_argument("--log-level", help="Override app.log_level from the config")
    sub = parser.add_subparsers(dest="command", required=True)

    review = sub.add_parser("review", help="Summarize one hiring cycle")
    review.add_argument("--cycle", help="Cycle name, e.g. 'Post Grad 2022-2023'")

    sub.add_parser("companies", help="List every company in the Applications database")
    sub.add_parser("subscriptions", help="Total monthly and yearly subscription costs")

    notes = sub.add_parser("migrate-notes", help="Append each page's Notes property to its body")
    notes.add_argument("--dry-run", action="store_true", help="Do not append blocks; print instead")
    return parser

def main(argv: Optional[List[str]] = None, source=None) -> int:
    args = build_parser().parse_args(argv)

    if args.log_level is not None and not is_log_level(args.log_level):
        print(f"[CONFIG] Unknown log level: {args.log_level!r}", file=sys.stderr)
        return 2
    try:
        cfg = load_settings(args.config)
    except ConfigError as exc:
        print(f"[CONFIG] {exc}", file=sys.stderr)
        return 2

    logging.basicConfig(level=(args.log_level or cfg.app["log_level"]).upper(), format=LOG_FORMAT)
    source = source or NotionSource.from_settings(cfg)

    try:
        if args.command == "review":
            return run_review(cfg, source, args.cycle)
        if args.command == "companies":
            return run_companies(cfg, source)
        if args.command == "migrate-notes":
            return run_migrate_notes(cfg, source, dry_run=args.dry_run)
        return run_subscriptions(cfg, source)
    except ConfigError as exc:
        LOGGER.error("%s", exc)
        return 2
    except UpstreamFault as exc:
        LOGGER.error("Notion source unreachable or malformed: %s", exc)
        return 1

if __name__ == "__main__":
    sys.exit(main())
