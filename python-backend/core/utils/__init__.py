"""
Utility modules for core functionality.

Modules:
- decorators: Timing helper (timer)
"""

from .decorators import timer

__all__ = ["timer"]
