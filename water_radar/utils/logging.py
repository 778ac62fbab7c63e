"""
Logging setup for water-radar.

``configure_logging(config, debug=...)`` is called once per CLI command.
Library modules only ever do ``logging.getLogger(__name__)``.

Records go to stderr so that piping a command's stdout (reports, exports)
never mixes in log lines.  With ``json_format = true`` each record is a
single JSON object::

    {"ts": "2026-02-24T15:00:00Z", "level": "INFO", "logger": "water_radar.seed_loader", "msg": "..."}
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from water_radar.config import LoggingConfig

TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s | %(message)s"
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Attributes every LogRecord carries; anything else came in through ``extra=``.
_RESERVED_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class JsonLineFormatter(logging.Formatter):
    """Render a record as one JSON line, ``extra=`` fields included."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict = {
            "ts": created.strftime(TIMESTAMP_FORMAT),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        entry.update(
            (k, v) for k, v in vars(record).items()
            if k not in _RESERVED_ATTRS and not k.startswith("_")
        )
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str, ensure_ascii=False)


def build_formatter(json_format: bool) -> logging.Formatter:
    if json_format:
        return JsonLineFormatter()
    return logging.Formatter(TEXT_FORMAT, datefmt=TIMESTAMP_FORMAT)


def _handler(
    formatter: logging.Formatter,
    level: int,
    log_file: Optional[str] = None,
) -> logging.Handler:
    handler: logging.Handler
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def configure_logging(config: "LoggingConfig", debug: bool = False) -> int:
    """Install root handlers from a ``LoggingConfig``.

    Args:
        config: ``[logging]`` section of ``AppConfig``.
        debug:  Force DEBUG regardless of ``config.level``.

    Returns:
        The effective numeric log level.
    """
    level = logging.DEBUG if debug else logging.getLevelName(config.level)
    if not isinstance(level, int):
        level = logging.INFO

    formatter = build_formatter(config.json_format)
    handlers = [_handler(formatter, level)]
    if config.log_file:
        handlers.append(_handler(formatter, level, config.log_file))

    logging.basicConfig(level=level, handlers=handlers, force=True)
    return level
