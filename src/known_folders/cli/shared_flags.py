"""Shared Click option decorators for the known-folders CLI."""

import functools
import os

import click

from known_folders.core.domain.entities import KnownFolder


def format_option():
    """Add --format option (text|json)."""

    def decorator(f):
        return click.option(
            "--format",
            "format",
            type=click.Choice(["text", "json"], case_sensitive=False),
            default="text",
            help="Output format (text|json).",
        )(f)

    return decorator


def include_timestamp_option():
    """Add --include-timestamp flag."""

    def decorator(f):
        return click.option(
            "--include-timestamp",
            is_flag=True,
            default=False,
            help="Include ISO 8601 UTC timestamp in JSON output.",
        )(f)

    return decorator


def complete_folders(ctx, param, incomplete: str):
    """Shell completion for folder names."""
    return [f.value for f in KnownFolder if f.value.startswith(incomplete.lower())]


def folder_argument():
    """Add the FOLDER positional argument."""

    def decorator(f):
        return click.argument("folder", shell_complete=complete_folders)(f)

    return decorator


def with_log_silence():
    """Silence log events for JSON output unless debug logging is enabled."""

    def decorator(f):
        @functools.wraps(f)
        def wrapper(*args, **kwargs):
            previous = os.environ.get("KNOWN_FOLDERS_LOG_SILENT")
            silence_logs = (
                os.environ.get("KNOWN_FOLDERS_DEBUG") != "1" and kwargs.get("format") == "json"
            )
            changed = False
            if silence_logs and previous != "1":
                os.environ["KNOWN_FOLDERS_LOG_SILENT"] = "1"
                changed = True
            try:
                return f(*args, **kwargs)
            finally:
                if changed:
                    if previous is None:
                        os.environ.pop("KNOWN_FOLDERS_LOG_SILENT", None)
                    else:
                        os.environ["KNOWN_FOLDERS_LOG_SILENT"] = previous

        return wrapper

    return decorator


def output_options():
    """Composite decorator: --format, --include-timestamp and log silencing."""

    def decorator(f):
        f = format_option()(f)
        f = include_timestamp_option()(f)
        f = with_log_silence()(f)
        return f

    return decorator
