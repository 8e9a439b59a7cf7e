"""ASGI entrypoint for the macros block API.

Serve with ``uvicorn macros_tracker.api.asgi:app``. The module-level
``container`` exposes the block cache so operators can invalidate it.
"""

from macros_tracker.api.app import create_app
from macros_tracker.containers import build_container

container = build_container()
app = create_app(container)
