"""STC Inspector.

Live, read-only introspection of an STC orchestration engine:
- paginated and replayed views of the event log
- program structure trees derived without executing programs
- workflow status summaries
"""

__version__ = "0.1.0"

from stc_inspector.config import InspectorSettings
from stc_inspector.inspector import Inspector

__all__ = ["__version__", "Inspector", "InspectorSettings"]
