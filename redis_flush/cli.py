"""
Redis Flush command-line interface.

Usage:
    redis-flush stats                      # Show Redis statistics
    redis-flush --json stats               # Statistics as JSON
    redis-flush flush                      # FLUSHALL after confirmation
    redis-flush flush --yes                # Skip confirmation
    redis-flush --host 10.0.0.5 flush      # Custom connection

Connection settings come from command-line options first, then environment
variables / .env (REDIS_URL, REDIS_HOST, REDIS_PORT, REDIS_DB, REDIS_PASSWORD),
then defaults.

With --json, stdout carries only the JSON document; the flush preview and
confirmation prompt are written to stderr.
"""

import argparse
import json
import os
import sys
from typing import Any, List, Optional, TextIO, Tuple

from redis_flush.config import Settings, get_settings
from redis_flush.formatting import (
    format_memory,
    format_number,
    format_percentage,
    memory_bar_class,
)
from redis_flush.models import FlushResult, RedisStatistics
from redis_flush.service import RedisFlushService, create_default_pool

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


class TerminalColors:
    """ANSI color codes for styled terminal output."""

    RESET = "\033[0m"
    BOLD = "\033[1m"

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    MAGENTA = "\033[95m"
    CYAN = "\033[96m"
    WHITE = "\033[97m"
    GRAY = "\033[90m"


MEMORY_BAR_COLORS = {
    "memory-bar-critical": TerminalColors.RED,
    "memory-bar-warning": TerminalColors.YELLOW,
    "memory-bar-normal": TerminalColors.GREEN,
    "memory-bar-unknown": TerminalColors.GRAY,
}

# status kind -> (icon, color, bold)
STATUS_STYLES = {
    "success": ("✓", TerminalColors.GREEN, False),
    "error": ("✗", TerminalColors.RED, True),
    "warning": ("⚠", TerminalColors.YELLOW, False),
    "info": ("ℹ", TerminalColors.BLUE, False),
}


class TerminalFormatter:
    """
    Writes styled report lines to one stream

    Colors are used only when requested and the stream is a terminal.
    """

    def __init__(self, use_colors: bool = True, stream: Optional[TextIO] = None):
        self.stream = stream if stream is not None else sys.stdout
        self.use_colors = use_colors and self._supports_colors(self.stream)

    @staticmethod
    def _supports_colors(stream: TextIO) -> bool:
        if sys.platform == "win32":
            return os.getenv("TERM") in ("xterm", "xterm-256color") or bool(
                os.getenv("ANSICON")
            )
        return hasattr(stream, "isatty") and stream.isatty()

    def colorize(self, text: str, color: str = "", bold: bool = False) -> str:
        if not self.use_colors or not color:
            return text

        style = TerminalColors.BOLD if bold else ""
        return f"{style}{color}{text}{TerminalColors.RESET}"

    def write(self, text: str = "", end: str = "\n") -> None:
        self.stream.write(f"{text}{end}")
        self.stream.flush()

    def section(self, title: str, major: bool = False, width: int = 60) -> None:
        """Write a title between two rules; major sections use ``=`` in cyan."""
        rule_color = TerminalColors.CYAN if major else TerminalColors.GRAY
        title_color = TerminalColors.CYAN if major else TerminalColors.WHITE
        rule = self.colorize(("=" if major else "-") * width, rule_color, bold=major)

        self.write(f"\n{rule}")
        self.write(self.colorize(f"  {title}", title_color, bold=True))
        self.write(f"{rule}\n")

    def status(self, kind: str, message: str) -> None:
        icon, color, bold = STATUS_STYLES[kind]
        self.write(self.colorize(f"{icon} {message}", color, bold=bold))

    def detail(self, label: str, value: Any, color: str = TerminalColors.CYAN) -> None:
        self.write(f"  {self.colorize(f'{label}:', color, bold=True)} {value}")


# ============================================================================
# Rendering
# ============================================================================


def render_statistics(formatter: TerminalFormatter, stats: RedisStatistics) -> None:
    """Write a statistics snapshot."""
    formatter.section("Redis Server")
    formatter.detail("Version", stats.redis_version)
    formatter.detail("Uptime", stats.uptime_formatted)
    formatter.detail("Connected Clients", format_number(stats.connected_clients))

    formatter.section("Memory")
    formatter.detail("Used", format_memory(stats.used_memory_mb))
    formatter.detail("Peak", format_memory(stats.used_memory_peak_mb))
    formatter.detail(
        "Max",
        format_memory(stats.max_memory_mb) if stats.max_memory_mb else "unlimited",
    )

    usage = stats.memory_usage_percentage
    formatter.detail(
        "Usage",
        formatter.colorize(format_percentage(usage), MEMORY_BAR_COLORS[memory_bar_class(usage)]),
    )

    formatter.section("Keyspace")
    if not stats.keyspace:
        formatter.status("info", "No keys in any database")
    for database, info in stats.keyspace.items():
        formatter.detail(
            f"db{database}",
            f"{format_number(info.keys)} keys, "
            f"{format_number(info.expires)} expiring ({info.expiry_percentage:.1f}%), "
            f"avg TTL {info.avg_ttl_formatted}",
        )
    formatter.write()
    formatter.detail("Total Keys", format_number(stats.total_keys))
    formatter.detail("Total Expiring", format_number(stats.total_expires))


def render_flush_result(formatter: TerminalFormatter, result: FlushResult) -> None:
    """Write the outcome of a flush."""
    formatter.section("Flush Result")

    if not result.success:
        formatter.status("error", result.summary())
        return

    formatter.detail("Targets", ", ".join(result.targets_flushed))
    formatter.detail("Memory Before", format_memory(result.memory_before_mb))
    formatter.detail("Memory After", format_memory(result.memory_after_mb))
    formatter.detail(
        "Memory Freed",
        f"{format_memory(result.memory_freed_mb)} "
        f"({format_percentage(result.memory_freed_percentage)})",
        TerminalColors.GREEN,
    )
    formatter.detail("Keys Deleted (estimate)", format_number(result.keys_deleted))
    formatter.detail(
        "Duration", f"{result.execution_time_seconds:.3f} seconds", TerminalColors.MAGENTA
    )
    formatter.write()
    formatter.status("success", result.summary())


def confirm_flush(formatter: TerminalFormatter, stats: Optional[RedisStatistics]) -> bool:
    """Ask the user to confirm FLUSHALL; the prompt goes to the formatter's stream."""
    formatter.section("Confirmation Required")

    warnings = ["FLUSHALL permanently deletes ALL keys in ALL databases!"]
    if stats is not None:
        warnings.append(f"About {format_number(stats.total_keys)} keys will be deleted.")
    for warning in warnings:
        formatter.write(formatter.colorize(f"⚠️  WARNING: {warning}", TerminalColors.RED, bold=True))
    formatter.write()

    formatter.write(
        formatter.colorize(
            "Type 'yes' to proceed or anything else to cancel: ",
            TerminalColors.YELLOW,
            bold=True,
        ),
        end="",
    )
    response = input().strip().lower()

    return response in ("yes", "y")


# ============================================================================
# Commands
# ============================================================================


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2, default=str))


def run_stats(service: RedisFlushService, args: argparse.Namespace, formatter: TerminalFormatter) -> int:
    stats = service.get_statistics()

    if args.json:
        _print_json(stats.to_dict() if stats else None)
        return EXIT_OK if stats else EXIT_FAILURE

    formatter.section("REDIS STATISTICS", major=True)
    if stats is None:
        formatter.status("error", "Redis statistics unavailable")
        return EXIT_FAILURE

    render_statistics(formatter, stats)
    return EXIT_OK


def run_flush(service: RedisFlushService, args: argparse.Namespace, formatter: TerminalFormatter) -> int:
    if not args.yes:
        # Keep stdout clean for the JSON document
        preview = (
            TerminalFormatter(use_colors=not args.no_color, stream=sys.stderr)
            if args.json
            else formatter
        )
        preview.section("REDIS FLUSHALL", major=True)
        stats = service.get_statistics()
        if stats is not None:
            render_statistics(preview, stats)
        if not confirm_flush(preview, stats):
            preview.status("info", "Operation cancelled by user")
            return EXIT_FAILURE

    result = service.flush_all()

    if args.json:
        _print_json(result.to_dict())
    else:
        render_flush_result(formatter, result)

    return EXIT_OK if result.success else EXIT_FAILURE


COMMANDS = {
    "stats": run_stats,
    "flush": run_flush,
}


# ============================================================================
# Command-Line Interface
# ============================================================================


def create_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="redis-flush",
        description="Inspect Redis statistics and run FLUSHALL",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment Variables:
  REDIS_URL           - Full Redis URL (overrides host/port/db)
  REDIS_HOST          - Redis server host
  REDIS_PORT          - Redis server port
  REDIS_DB            - Redis database index
  REDIS_PASSWORD      - Redis authentication password

Warning:
  FLUSHALL deletes ALL keys in ALL databases of the server.
        """,
    )

    conn_group = parser.add_argument_group("Redis Connection")
    conn_group.add_argument("--url", type=str, default=None, metavar="URL", help="Redis URL")
    conn_group.add_argument("--host", type=str, default=None, metavar="HOST", help="Redis server host")
    conn_group.add_argument("--port", type=int, default=None, metavar="PORT", help="Redis server port")
    conn_group.add_argument("--db", type=int, default=None, metavar="DB", help="Redis database index")
    conn_group.add_argument("--password", type=str, default=None, metavar="PASSWORD", help="Redis password")

    output_group = parser.add_argument_group("Output")
    output_group.add_argument("--json", action="store_true", help="Print results as JSON")
    output_group.add_argument("--no-color", action="store_true", help="Disable colored output")

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("stats", help="Show Redis statistics")
    flush_parser = subparsers.add_parser("flush", help="Run FLUSHALL on the Redis server")
    flush_parser.add_argument(
        "--yes", "--no-confirm", dest="yes", action="store_true",
        help="Skip confirmation prompt (use with caution!)",
    )

    return parser


def validate_arguments(args: argparse.Namespace) -> Tuple[bool, Optional[str]]:
    """
    Validate command-line arguments.

    Returns:
        Tuple of (is_valid, error_message)
    """
    if args.port is not None and (args.port < 1 or args.port > 65535):
        return False, f"Invalid port number: {args.port} (must be 1-65535)"

    if args.db is not None and args.db < 0:
        return False, f"Invalid database index: {args.db} (must be >= 0)"

    return True, None


def settings_from_arguments(args: argparse.Namespace, settings: Optional[Settings] = None) -> Settings:
    """Apply command-line connection overrides on top of settings."""
    settings = settings or get_settings()
    overrides = {
        "redis_url": args.url,
        "redis_host": args.host,
        "redis_port": args.port,
        "redis_db": args.db,
        "redis_password": args.password,
    }
    return settings.model_copy(
        update={key: value for key, value in overrides.items() if value is not None}
    )


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the redis-flush command.

    Returns:
        Exit code (0 success, 1 failure or cancelled, 2 invalid arguments)
    """
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    formatter = TerminalFormatter(use_colors=not (args.no_color or args.json))

    is_valid, error_message = validate_arguments(args)
    if not is_valid:
        formatter.status("error", f"Invalid arguments: {error_message}")
        return EXIT_USAGE

    pool = create_default_pool(settings_from_arguments(args))
    service = RedisFlushService(pool)

    try:
        return COMMANDS[args.command](service, args, formatter)
    except KeyboardInterrupt:
        formatter.write()
        formatter.status("warning", "Operation interrupted by user")
        return EXIT_FAILURE
    finally:
        for backend in pool.values():
            backend.close()


if __name__ == "__main__":
    sys.exit(main())
