from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional


class _ThirdPartyNoiseFilter(logging.Filter):
    """Keep learnlog and server logs, let other libraries through only at WARNING+."""

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name.startswith("learnlog") or name.startswith("uvicorn"):
            return True
        if name == "py.warnings":
            return record.levelno >= logging.ERROR
        return record.levelno >= logging.WARNING


def setup_logging(level: str = "INFO", log_dir: Optional[str] = None) -> None:
    """
    Configure root logging once at startup:
    - console handler on stderr, filtered
    - optional file handler with everything at DEBUG
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(getattr(logging, level.upper(), logging.INFO))
    ch.setFormatter(fmt)
    ch.addFilter(_ThirdPartyNoiseFilter())
    root.addHandler(ch)

    if log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(path / "learnlog.log"), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(fmt)
        root.addHandler(fh)

    logging.captureWarnings(True)
