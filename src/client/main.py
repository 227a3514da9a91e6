import argparse
import logging
import sys

from src.catalog.anchors import resolve_jump
from src.catalog.models import Condition
from src.catalog.presentation import cfr_summary, citation_anchors, rating_lines, section_anchors
from src.catalog.query_parser import jump_hint, parse
from src.catalog.ranking import search
from src.client.catalog_client import CatalogClient
from src.client.config import ClientConfig


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )


def format_results(conditions: tuple[Condition, ...], query: str, system: str = "") -> list[str]:
    result = search(conditions, query, system=system)
    if not result.hits:
        return ["No matches. Try “8520”, “5260”, “8100”, or “ptsd”."]

    lines: list[str] = []
    if result.system:
        lines.append(f"System: {result.system}")
    for hit in result.hits:
        condition = hit.condition
        header = f"{condition.name} [{condition.id}]"
        if condition.body_system:
            header += f" ({condition.body_system})"
        lines.append(header)
        summary = cfr_summary(condition)
        if summary:
            lines.append(f"  CFR: {summary}")
        if hit.reason:
            lines.append(f"  Matched: {hit.reason} (score {hit.score})")
    return lines


def format_detail(condition: Condition, jump: str = "") -> list[str]:
    lines = [condition.name]
    if condition.disclaimer:
        lines.append(f"Note: {condition.disclaimer}")
    if condition.body_system:
        lines.append(f"Body system: {condition.body_system}")
    for ref in condition.cfr:
        lines.append(f"  {ref.section} DC {ref.diagnostic_code} — {ref.title} <{ref.url}>")
    for line in rating_lines(condition):
        lines.append(f"  Rating: {line}")
    for item in condition.evidence_checklist:
        lines.append(f"  [ ] {item}")

    if jump.strip():
        target = jump_hint(parse(jump), jump)
        resolution = resolve_jump(target, citation_anchors(condition), section_anchors(condition))
        if resolution.anchor:
            lines.append(f"Jumped to: {resolution.anchor}")
    return lines


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Search the VA CFR condition catalog.")
    parser.add_argument("--base-url", default=None, help="Catalog API base URL")
    sub = parser.add_subparsers(dest="command", required=True)

    search_cmd = sub.add_parser("search", help="Search conditions")
    search_cmd.add_argument("query", nargs="*", help="Query text, e.g. 'dc 8520' or 'system ear'")
    search_cmd.add_argument("--system", default="", help="Body system filter")

    show_cmd = sub.add_parser("show", help="Show one condition")
    show_cmd.add_argument("condition_id")
    show_cmd.add_argument("--jump", default="", help="Jump hint, e.g. 8520 or notes")
    return parser


def run(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    cfg = ClientConfig.from_env()
    _setup_logging(cfg.log_level)

    client = CatalogClient(
        base_url=args.base_url or cfg.base_url,
        timeout_sec=cfg.timeout_sec,
        retries=cfg.retries,
    )

    if args.command == "search":
        if not client.refresh():
            print("Could not load conditions from the catalog API.", file=sys.stderr)
            return 1
        for line in format_results(client.conditions, " ".join(args.query), system=args.system):
            print(line)
        return 0

    condition = client.fetch_condition(args.condition_id)
    if condition is None:
        print(f"Condition not found: {args.condition_id}", file=sys.stderr)
        return 1
    for line in format_detail(condition, args.jump):
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(run())
