"""Abstract collaborator interfaces consumed by the wallet manager."""

from ensemble_wallet.interfaces.chain_client import BaseChainClient
from ensemble_wallet.interfaces.config_store import BaseConfigStore

__all__ = ["BaseChainClient", "BaseConfigStore"]
