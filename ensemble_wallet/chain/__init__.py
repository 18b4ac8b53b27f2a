"""Chain clients for balance queries and transaction broadcast."""

from ensemble_wallet.chain.web3_client import Web3ChainClient

__all__ = ["Web3ChainClient"]
