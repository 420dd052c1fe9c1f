"""
Navigation - where a course action leads.

Components:
- routes: Destination / NavAction enums and the Route value
- resolver: Ordered rule table mapping a Course (or URL) and action to a Route
- lesson_loader: Lesson-level backend calls for a resolved Route
"""

from src.navigation.routes import Destination, NavAction, Route

__all__ = [
    "Destination",
    "NavAction",
    "Route",
]
