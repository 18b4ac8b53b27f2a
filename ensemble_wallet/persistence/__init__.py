"""Persistence layer for CLI state outside the wallet store.

Provides:
- JsonConfigStore: active wallet pointer kept in the CLI config file
"""

from ensemble_wallet.persistence.config_store import JsonConfigStore

__all__ = ["JsonConfigStore"]
