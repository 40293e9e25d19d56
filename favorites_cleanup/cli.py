"""Command-line entry point for the orphaned favorites cleanup.

Usage:
    cleanup-favorites ./serviceAccount.json
    cleanup-favorites ./serviceAccount.json --dry-run
    cleanup-favorites ./serviceAccount.json --yes --verbose
"""

import argparse
import json
import sys
from typing import List, Optional

from favorites_cleanup import env
from favorites_cleanup.errors import CleanupError
from favorites_cleanup.pipeline.cleanup_favorites import CleanupConfig, run
from favorites_cleanup.utils.logging import get_logger
from favorites_cleanup.utils.prompt import console_confirm

EXAMPLES = """\
Examples:
  cleanup-favorites ./serviceAccount.json
  cleanup-favorites ./serviceAccount.json --dry-run
  cleanup-favorites ./serviceAccount.json --yes --verbose
"""


class _ArgumentParser(argparse.ArgumentParser):
    """Usage errors exit with status 1 instead of argparse's 2."""

    def error(self, message: str) -> None:
        self.print_usage(sys.stderr)
        self.exit(1, f"Error: {message}\nUse --help for usage information\n")


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {value}")
    return number


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = _ArgumentParser(
        prog="cleanup-favorites",
        description="Remove orphaned favorites that reference deleted AI bots",
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
    )
    parser.add_argument("service_account", help="Path to Firebase service account JSON file")
    parser.add_argument("-y", "--yes", dest="auto_confirm", action="store_true",
                        help="Auto-confirm deletions without prompting")
    parser.add_argument("--dry-run", action="store_true",
                        help="Show what would be deleted without making changes")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument("--user", dest="user_ids", action="append", default=None, metavar="UID",
                        help="Only scan this user (repeatable)")
    parser.add_argument("--concurrency", type=_positive_int, default=env.SCAN_CONCURRENCY,
                        help="Users scanned in parallel")
    parser.add_argument("--delete-concurrency", type=_positive_int, default=env.DELETE_CONCURRENCY,
                        help="Deletions issued in parallel")
    parser.add_argument("--output-json", default=None, metavar="PATH",
                        help="Also write the run result as JSON to PATH")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logger = get_logger(verbose=args.verbose)
    config = CleanupConfig(
        credential_source=args.service_account,
        auto_confirm=args.auto_confirm,
        dry_run=args.dry_run,
        verbose=args.verbose,
        user_ids=args.user_ids,
        scan_concurrency=args.concurrency,
        delete_concurrency=args.delete_concurrency,
    )
    try:
        result = run(config, confirm=console_confirm)
    except CleanupError as e:
        logger.error(f"❌ Error: {e}")
        return 1
    except Exception as e:
        logger.error(f"❌ Error: {e}")
        logger.debug("Unhandled error", exc_info=True)
        return 1

    if args.output_json:
        try:
            with open(args.output_json, "w", encoding="utf-8") as handle:
                json.dump(result.to_dict(), handle, indent=2, sort_keys=True)
        except OSError as e:
            logger.error(f"❌ Could not write result to {args.output_json}: {e}")
        else:
            logger.info(f"💾 Wrote result to {args.output_json}")
    return result.exit_code


def run_cli(argv: Optional[List[str]] = None) -> None:
    raise SystemExit(main(argv))


if __name__ == "__main__":
    run_cli()


__all__ = ["parse_args", "main", "run_cli"]
