"""
Storage for users waiting to be matched
"""

from .base import WaitingPoolStore
from .database import DatabaseWaitingPool
from .memory import InMemoryWaitingPool

__all__ = (
    "DatabaseWaitingPool",
    "InMemoryWaitingPool",
    "WaitingPoolStore",
)
