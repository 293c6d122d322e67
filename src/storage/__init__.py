"""
Storage Package

Local persistence for the player's game state, challenge catalog and
accepted challenge ids.
"""

from src.storage.local_store import LocalStore

__all__ = ["LocalStore"]
