"""Serverless entrypoint that serves the macros block API from a source checkout."""

from __future__ import annotations

import sys
from pathlib import Path

SRC = Path(__file__).resolve().parents[1] / "src"
if SRC.is_dir() and str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from macros_tracker.api.asgi import app  # noqa: E402

__all__ = ["app"]
