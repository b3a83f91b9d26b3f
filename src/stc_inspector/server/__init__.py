"""FastAPI server adapter for stc-inspector.

Design intent:
- Keep data access in `stc_inspector.inspector`
- Keep server-specific concerns (routing, CORS, pager sessions) here
"""

from __future__ import annotations

__all__ = ["create_app"]

from stc_inspector.server.app import create_app
