"""
HTTP API for rivalscope.

Provides:
- Mission trigger endpoint (fire and forget, report delivered by email)
- Recurring job management
- Background sweep of due recurring missions
"""

from .server import create_app

__all__ = ["create_app"]
