"""Keyword Niche - CLI entrypoint."""

from __future__ import annotations

import argparse
import asyncio
import sys

from keyword_niche.config import AppConfig
from keyword_niche.io.outputs import (
    blog_competition_summary,
    expand_summary,
    search_volume_summary,
    to_json,
)
from keyword_niche.orchestrator import (
    run_batch,
    run_blog_competition,
    run_expand,
    run_niche_score,
    run_search_volume,
    run_trend,
    run_trending_discover,
)
from keyword_niche.utils.exceptions import NaverError
from keyword_niche.utils.logger import get_logger
from keyword_niche.utils.validators import validate_keyword, validate_keywords

MODES = [
    "expand", "niche", "volume", "trend", "blog", "batch", "trending",
]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Korean keyword niche analysis (Naver SearchAd, DataLab, Blog Search)",
    )
    parser.add_argument(
        "--mode",
        choices=MODES,
        required=True,
        help="Tool to run",
    )
    parser.add_argument(
        "--keyword",
        action="append",
        default=[],
        help="Keyword to analyze (repeat for batch mode)",
    )
    parser.add_argument(
        "--top",
        type=int,
        default=None,
        help="Full score count (expand) or result limit (trending)",
    )
    return parser


async def _run(config: AppConfig, mode: str, keywords: list[str], top: int | None) -> str:
    keyword = keywords[0]
    if mode == "expand":
        return to_json(expand_summary(await run_expand(config, keyword, top)))
    if mode == "niche":
        return to_json(await run_niche_score(config, keyword))
    if mode == "volume":
        return to_json(search_volume_summary(await run_search_volume(config, keyword)))
    if mode == "trend":
        return to_json(await run_trend(config, keyword))
    if mode == "blog":
        return to_json(
            blog_competition_summary(await run_blog_competition(config, keyword)),
        )
    if mode == "batch":
        return to_json(await run_batch(config, keywords))
    return to_json(await run_trending_discover(config, keyword, top))


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        if args.mode == "batch":
            keywords = validate_keywords(args.keyword)
        elif len(args.keyword) != 1:
            parser.error(f"--mode {args.mode} takes exactly one --keyword")
        else:
            keywords = [validate_keyword(args.keyword[0])]
    except ValueError as exc:
        parser.error(str(exc))

    if args.top is not None and not 1 <= args.top <= 20:
        parser.error("--top must be between 1 and 20")

    config = AppConfig()
    logger = get_logger("keyword_niche", config.log_level, config.log_dir)

    missing = config.missing_credentials()
    if missing:
        logger.warning("Missing credentials: %s", ", ".join(missing))

    logger.info("Running %s via CLI", args.mode)
    try:
        output = asyncio.run(_run(config, args.mode, keywords, args.top))
    except NaverError as exc:
        logger.error("%s failed: %s", args.mode, exc)
        return 1

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
