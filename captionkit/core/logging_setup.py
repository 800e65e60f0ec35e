"""
Purpose:
- One place to configure stdlib logging for the API process.
- Modules just do `logging.getLogger(__name__)`; this wires the handler + level.
"""

from __future__ import annotations
import logging

LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"

def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    lvl = logging.getLevelName((level or "INFO").upper())
    if not isinstance(lvl, int):
        lvl = logging.INFO
    root.setLevel(lvl)
    # avoid stacking handlers when create_app() runs more than once (tests, reload)
    if any(getattr(h, "_captionkit", False) for h in root.handlers):
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._captionkit = True  # type: ignore[attr-defined]
    root.addHandler(handler)
