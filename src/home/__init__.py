"""
Home - initialization of the data behind the home screen.
"""

from src.home.orchestrator import InitializationOrchestrator, enrollment_flag
from src.home.snapshot import InitializationSnapshot, count_unread

__all__ = [
    "InitializationOrchestrator",
    "InitializationSnapshot",
    "count_unread",
    "enrollment_flag",
]
