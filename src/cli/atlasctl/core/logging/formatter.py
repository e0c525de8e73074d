"""Formatting and output of atlasctl log records."""

import logging
import sys

from click import style

from atlasctl.core.logging.logger import LogLevel

INDENT = " " * 5


class AtlasLogFormatter(logging.Formatter):
    """Formatter for atlasctl logs.

    Prefixes each record with a level marker and indents continuation
    lines under the first one. Records logged by the API client carry
    `http_method`, `http_url` and optionally `status_code`; these render
    as `GET <url> -> 200`. Records carrying `elapsed` get the duration
    appended.

    Debug records also show the logger name and line number.
    """

    def format(self, record: logging.LogRecord) -> str:
        msg = record.getMessage().strip()
        if not msg:
            return ""

        level = LogLevel.for_record(record.levelno)
        prefix = level.prefix
        if sys.stderr.isatty():
            prefix = style(prefix, fg=level.color, bold=True)
        if record.levelno <= logging.DEBUG:
            prefix = f"{prefix}{record.name}:{record.lineno} "

        lines = f"{msg}{self._context(record)}".splitlines()
        if record.exc_info:
            lines.extend(self.formatException(record.exc_info).splitlines())
        rest = [f"{INDENT}{line}" for line in lines[1:]]
        return "\n".join([f"{prefix}{lines[0]}"] + rest)

    @staticmethod
    def _context(record: logging.LogRecord) -> str:
        context = ""
        method = getattr(record, "http_method", None)
        if method:
            context = f" {method} {getattr(record, 'http_url', '')}"
            status_code = getattr(record, "status_code", None)
            if status_code is not None:
                context = f"{context} -> {status_code}"
        elapsed = getattr(record, "elapsed", None)
        if elapsed is not None:
            context = f"{context} ({elapsed:.2f}s)"
        return context


class AtlasLogHandler(logging.StreamHandler):
    """Write records to whatever `sys.stderr` currently is.

    Looking the stream up on each emit keeps output inside click's
    `CliRunner` capture when tests swap `sys.stderr`.
    """

    atlasctl = True

    @property
    def stream(self):
        return sys.stderr

    @stream.setter
    def stream(self, value):
        pass
