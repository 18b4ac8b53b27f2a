"""Abstract base class defining the chain client interface."""

from abc import ABC, abstractmethod

from ensemble_wallet.models import WalletBalance

__all__ = ["BaseChainClient"]


class BaseChainClient(ABC):
    """Abstract base class for blockchain access.

    The wallet manager never builds transactions itself; it only asks the
    chain client for balances and hands it raw signed transactions.
    """

    @abstractmethod
    def get_balance(self, address: str) -> WalletBalance:
        """Fetch the native (and any known token) balance of an address.

        Args:
            address: Checksummed or lowercase 0x address.

        Returns:
            WalletBalance for the address.
        """
        raise NotImplementedError

    @abstractmethod
    def send_raw_transaction(self, raw_transaction: bytes) -> str:
        """Broadcast a signed transaction.

        Args:
            raw_transaction: RLP-encoded signed transaction bytes.

        Returns:
            Transaction hash as a 0x-prefixed hex string.
        """
        raise NotImplementedError
