"""
Application layer - Use cases and transaction boundaries.

Use cases orchestrate the domain entities and the storage ports to implement
viewer resolution, session tracking, navigation recording and analytics.
"""

from .unit_of_work import UnitOfWork

__all__ = ["UnitOfWork"]
