"""
Data models for sessions.

This module contains pure data classes with no I/O.
"""

from .session import AssociatedUser, OnlineAccessInfo, Session

__all__ = ['AssociatedUser', 'OnlineAccessInfo', 'Session']
