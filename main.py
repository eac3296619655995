#!/usr/bin/env python3

from typing import Optional, Sequence
import locale
import logging

from comment_explorer.cli import parse_args, print_exclusion_reports, print_results, resolve_roots, run
from comment_explorer.config import load_config


logger = logging.getLogger("comment_explorer")


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)

    # Configure logging early
    if args.log_level:
        level = getattr(logging, args.log_level)
    else:
        level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s:%(name)s:%(message)s")

    # Path order in the index follows the user's collation, not plain code points
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as e:
        logger.warning("Cannot apply the environment collation locale (%s), sorting paths by code point", e)

    try:
        cfg = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        logger.error("Invalid configuration: %s", e)
        return 1
    cfg = cfg.with_overrides(file_extensions=args.ext, exclude=args.exclude)
    roots = resolve_roots(args.roots, cfg)

    if args.check_exclusions:
        print_exclusion_reports(roots, cfg, args.max_files)
        return 0

    explorer = run(roots, cfg, workers=args.workers, max_files=args.max_files)
    print_results(explorer, args.json)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
