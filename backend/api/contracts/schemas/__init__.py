"""
Contract schemas for API endpoints.

Each schema module registers its contracts on import.
Import all schema modules here to auto-register contracts.
"""

# Import schema modules to auto-register contracts
from . import users

__all__ = ['users']
