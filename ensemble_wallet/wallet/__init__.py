"""Wallet management module.

Provides encrypted wallet storage, lifecycle operations, and active wallet
resolution.
"""

from ensemble_wallet.wallet.manager import Signer, UnlockedWallet, WalletManager
from ensemble_wallet.wallet.resolver import (
    current_wallet,
    resolve_wallet,
    resolve_wallet_or_fail,
    use_wallet,
)
from ensemble_wallet.wallet.store import WalletStore

__all__ = [
    "Signer",
    "UnlockedWallet",
    "WalletManager",
    "WalletStore",
    "current_wallet",
    "resolve_wallet",
    "resolve_wallet_or_fail",
    "use_wallet",
]
