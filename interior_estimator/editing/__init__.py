"""
Editing Session - Immutable in-progress estimate state.
"""

from .session import EstimateDraft

__all__ = ["EstimateDraft"]
