"""
Logging configuration for the plan alerts CLI.

Updates: v0.1.0 - 2026-10-12 - Rotating file log plus encoding-safe console output.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

DEFAULT_LOG_DIR = Path(__file__).parent.parent / "logs"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class EncodingSafeStreamHandler(logging.StreamHandler):
    """Stream handler that tolerates consoles without full Unicode support."""

    def emit(self, record: logging.LogRecord) -> None:  # type: ignore[override]
        stream = self.stream
        if stream is None:
            return

        msg = self.format(record)

        try:
            stream.write(msg + self.terminator)
        except UnicodeEncodeError:
            # Alert icons are emoji; legacy code pages cannot encode them.
            encoding = getattr(stream, "encoding", None) or "utf-8"
            safe_message = msg.encode(encoding, errors="replace").decode(encoding, errors="replace")
            try:
                stream.write(safe_message + self.terminator)
            except Exception:
                self.handleError(record)
                return
        except Exception:
            self.handleError(record)
            return

        self.flush()


def resolve_level(log_level: str) -> int:
    """Map a level name to its numeric value, defaulting to INFO."""
    normalized = log_level.upper() if isinstance(log_level, str) else "INFO"
    level = logging.getLevelName(normalized)
    return level if isinstance(level, int) else logging.INFO


def setup_logging(log_level: str = "INFO",
                  log_file: str = "plan_alerts.log",
                  max_bytes: int = 5 * 1024 * 1024,
                  backup_count: int = 3,
                  log_dir: Optional[Path] = None,
                  console: bool = True) -> None:
    """Configure the root logger with a rotating file and optional console output."""

    level = resolve_level(log_level)

    target_dir = log_dir or DEFAULT_LOG_DIR
    target_dir.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(level)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    file_handler = RotatingFileHandler(
        target_dir / log_file,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)

    if console:
        console_handler: logging.Handler = EncodingSafeStreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)

    # rich pulls in markdown-it, which is noisy at DEBUG.
    logging.getLogger("markdown_it").setLevel(logging.WARNING)
