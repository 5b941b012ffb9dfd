#!/usr/bin/env python3
"""
refdedup CLI — compare candidate folders against a reference folder.
Lists candidate files that duplicate reference files (or that have no copy in
the reference tree) and optionally deletes them. Deletion moves files to the
system trash unless --permanent is given.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import sys
import os
import time
from pathlib import Path
from typing import List, Optional, NoReturn
import logging

logging.basicConfig(
    level=logging.ERROR,
    format="%(levelname)-8s | %(name)-25s | %(message)s"
)

# === EARLY DEPENDENCY VALIDATION ===
_MISSING_DEPS = []
try:
    from send2trash import send2trash
except ImportError:
    _MISSING_DEPS.append("send2trash")

try:
    import xxhash
except ImportError:
    _MISSING_DEPS.append("xxhash")

if _MISSING_DEPS:
    print("❌ Missing required dependencies:", file=sys.stderr)
    print(f"   pip install {' '.join(_MISSING_DEPS)}", file=sys.stderr)
    sys.exit(1)

# === NORMAL IMPORTS (after validation) ===
from refdedup.core.models import ComparisonParams, OperationKind, DeletionReport
from refdedup.core.exceptions import RefDedupError, OperationCancelled
from refdedup.commands import ComparisonCommand
from refdedup.services.deletion_service import always_confirm
from refdedup.utils.convert_utils import ConvertUtils
from refdedup.aliases import (
    OPERATION_ALIASES, OPERATION_CHOICES, OPERATION_HELP_TEXT,
    DISPLAY_LIMIT, EPILOG_TEXT
)


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False
        self.command = ComparisonCommand()

        # Fix encoding for Windows consoles to prevent UnicodeEncodeError
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding='utf-8')
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding='utf-8')

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse and validate command-line arguments."""
        parser = argparse.ArgumentParser(
            description="refdedup — find candidate files that duplicate (or are missing from) a reference tree",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        # Required arguments
        parser.add_argument(
            "--reference", "-r",
            required=True,
            type=str,
            help="Reference directory (source of truth, never modified)"
        )
        parser.add_argument(
            "--candidates", "-c",
            required=True,
            nargs="+",
            type=str,
            metavar='',
            help="Candidate directories (space separated) checked against the reference"
        )

        # Comparison options
        parser.add_argument(
            "--operation", "-o",
            choices=OPERATION_CHOICES,
            default="duplicate",
            type=str,
            help=OPERATION_HELP_TEXT
        )
        parser.add_argument(
            "--skip-groups",
            default=0,
            type=int,
            metavar='',
            help="Number of size groups to skip in the confirmation window. Default: 0"
        )
        parser.add_argument(
            "--no-throttle",
            action="store_true",
            help="Confirm every size group instead of a bounded window"
        )
        parser.add_argument(
            "--ignore-sizes",
            nargs="+",
            default=["4096"],
            type=str,
            metavar='',
            help="File sizes (e.g., 4096, 4K) never treated as duplicates. Default: 4096"
        )

        # Actions
        parser.add_argument(
            "--delete",
            action="store_true",
            help="Delete the listed files and prune directories left empty. "
                 "Always shows the list before deletion."
        )
        parser.add_argument(
            "--force",
            action="store_true",
            help="Skip confirmation prompts when used with --delete (batch mode)"
        )
        parser.add_argument(
            "--permanent",
            action="store_true",
            help="Delete permanently instead of moving files to trash"
        )
        parser.add_argument(
            "--repeat",
            action="store_true",
            help="After each run, offer to run again with other candidate directories"
        )

        # Output options
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress non-essential output"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show detailed statistics and progress"
        )

        return parser.parse_args(args)

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before execution."""
        if args.force and not args.delete:
            self.error_exit("--force can only be used with --delete")

        if args.permanent and not args.delete:
            self.error_exit("--permanent can only be used with --delete")

        # Prevent interactive confirmation in non-TTY environments
        if (args.delete and not args.force) or args.repeat:
            if not sys.stdin.isatty() or not sys.stdout.isatty():
                self.error_exit(
                    "Cannot request interactive confirmation in non-interactive session.\n"
                    "Use --force flag (and no --repeat) when piping output or running in scripts."
                )

        if args.skip_groups < 0:
            self.error_exit("--skip-groups cannot be negative")

        for path in [args.reference] + args.candidates:
            root_path = Path(path).expanduser().resolve()
            if not root_path.exists():
                self.error_exit(f"Directory not found: {path}")
            if not root_path.is_dir():
                self.error_exit(f"Path is not a directory: {path}")

        for size in args.ignore_sizes:
            if not ConvertUtils.is_valid_size_format(size):
                self.error_exit(f"Invalid size format: {size}")

    def create_params(self, args: argparse.Namespace, candidates: Optional[List[str]] = None) -> ComparisonParams:
        """Create ComparisonParams from CLI arguments."""
        try:
            return ComparisonParams.from_human_readable(
                reference_root=str(Path(args.reference).expanduser().resolve()),
                candidate_roots=[str(Path(p).expanduser().resolve()) for p in (candidates or args.candidates)],
                operation=OPERATION_ALIASES.get(args.operation, OperationKind.DUPLICATE),
                skip_groups=args.skip_groups,
                excluded_sizes=args.ignore_sizes,
                throttle=not args.no_throttle,
            )
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}")

    def progress_callback(self, stage: str, current: int, total: Optional[int]) -> None:
        """CLI progress callback - shows progress in console."""
        if not self.verbose:
            return

        if total and total > 0:
            percent = (current / total) * 100
            sys.stderr.write(
                f"\r  [{stage}] {current}/{total} ({percent:.1f}%)"
            )
        else:
            sys.stderr.write(f"\r  [{stage}] {current} files processed...")
        sys.stderr.flush()

    @staticmethod
    def stopped_flag() -> bool:
        """Check if operation should stop (placeholder for signal handling)."""
        return False

    def run_comparison(self, params: ComparisonParams) -> List[str]:
        """Execute one comparison run."""
        if self.verbose:
            print(f"Comparing (operation: {params.operation.display_name})...")

        try:
            paths, stats = self.command.execute(
                params,
                progress_callback=self.progress_callback if self.verbose else None,
                stopped_flag=self.stopped_flag
            )
        except OperationCancelled:
            print("\n⚠️  Operation cancelled by user")
            sys.exit(130)
        except RefDedupError as e:
            self.error_exit(f"Comparison failed: {e}")

        if self.verbose:
            sys.stderr.write("\n")
            print("\n" + stats.print_summary())

        return paths

    def output_results(self, paths: List[str], params: ComparisonParams) -> List[str]:
        """Print selected files in reverse path order and return that order."""
        ordered = sorted(paths, reverse=True)
        if self.quiet:
            return ordered

        if not ordered:
            print(f"No {params.operation.display_name.lower()} found.")
            return ordered

        shown = ordered[:DISPLAY_LIMIT]
        print(f"\nList of {params.operation.display_name} ({len(ordered)} files):")
        for path in shown:
            print(f"   {path}")
        if len(ordered) > len(shown):
            print(f"   ...and {len(ordered) - len(shown)} more files")
        return ordered

    def ask_yes_no(self, description: str) -> bool:
        """Interactive confirmation capability."""
        if not sys.stdin.isatty() or not sys.stdout.isatty():
            self.error_exit(
                "Lost interactive terminal during operation. "
                "Use --force to proceed in non-interactive environments."
            )
        response = input(f"{description} [y/N]: ")
        return response.strip().lower() in ("y", "yes")

    def execute_delete(self, paths: List[str], params: ComparisonParams,
                       force: bool = False, permanent: bool = False) -> Optional[DeletionReport]:
        """Delete the selected files. Prompts unless force is set."""
        if not paths:
            if not self.quiet:
                print("No files found to DELETE, skipping.")
            return None

        if force:
            print("⚠️  WARNING: --force flag skips confirmation. Proceeding with deletion...")
        confirm = always_confirm if force else self.ask_yes_no

        try:
            report = self.command.delete(
                paths, params, confirm=confirm, permanent=permanent, stopped_flag=self.stopped_flag
            )
        except KeyboardInterrupt:
            print("\n⚠️  Operation cancelled by user (Ctrl+C)")
            sys.exit(130)

        self.report_deletion(report, permanent)
        return report

    def report_deletion(self, report: DeletionReport, permanent: bool) -> None:
        if report.cancelled and not report.file_results:
            print("Per your choice files were NOT DELETED.")
            return

        verb = "deleted" if permanent else "moved to trash"
        total = len(report.file_results)
        if report.failed:
            print(f"\n⚠️  Partial success: {report.deleted_count}/{total} files {verb}.")
            print(f"Failed to delete {len(report.failed)} file(s):")
            for result in report.failed[:5]:
                print(f"  • {os.path.basename(result.path)}: {result.error}")
            if len(report.failed) > 5:
                print(f"  ...and {len(report.failed) - 5} more files")
        else:
            print(f"✅ Successfully {verb} {report.deleted_count} files.")

        if report.directory_results and not self.quiet:
            print(f"Removed {report.pruned_count} empty directories.")
            for result in report.failed_directories:
                self.warning(f"Failed to remove directory {result.path}: {result.error}")

        for path in report.skipped:
            self.warning(f"Skipped file outside candidate directories: {path}")

    def read_candidate_paths(self) -> List[str]:
        """Read candidate directories one per line; an empty line ends input."""
        print("Fill in the candidate paths one by one. Finish with an EMPTY line.")
        paths = []
        while True:
            line = input("> ").strip()
            if not line:
                return paths
            if not Path(line).expanduser().is_dir():
                self.warning(f"Not a directory, ignored: {line}")
                continue
            paths.append(line)

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if not self.quiet:
            print(f"⚠️  {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv=None) -> None:
        """Main entry point with conditional output behavior."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet
        if self.verbose:
            logging.getLogger().setLevel(logging.INFO)

        self.validate_args(args)
        candidates = args.candidates

        while True:
            params = self.create_params(args, candidates)
            if not self.quiet:
                print(f"Reference: {params.reference_root}")
                print(f"Candidates: {', '.join(params.candidate_roots)}")

            paths = self.run_comparison(params)
            ordered = self.output_results(paths, params)

            if args.delete:
                self.execute_delete(ordered, params, force=args.force, permanent=args.permanent)

            if not args.repeat or not self.ask_yes_no("Run again with other candidate paths?"):
                break
            candidates = self.read_candidate_paths() or candidates

        elapsed = time.time() - self.start_time
        if self.verbose:
            print(f"\n✅ Completed in {elapsed:.2f} seconds")


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run()
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user (Ctrl+C)")
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
