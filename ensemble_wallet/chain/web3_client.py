"""Web3 JSON-RPC chain client for Ethereum-compatible networks."""

from decimal import Decimal

from loguru import logger
from web3 import Web3

from ensemble_wallet.interfaces.chain_client import BaseChainClient
from ensemble_wallet.models import WalletBalance


class Web3ChainClient(BaseChainClient):
    """Balance lookups and raw transaction broadcast over a single RPC endpoint.

    The Web3 instance is created lazily so constructing a client never
    touches the network.
    """

    def __init__(self, rpc_url: str, native_symbol: str = "ETH", web3: Web3 | None = None) -> None:
        self._rpc_url = rpc_url
        self._native_symbol = native_symbol
        self._web3 = web3

    @property
    def rpc_url(self) -> str:
        return self._rpc_url

    @property
    def web3(self) -> Web3:
        """Return a (cached) Web3 instance for the endpoint."""
        if self._web3 is None:
            self._web3 = Web3(Web3.HTTPProvider(self._rpc_url))
        return self._web3

    def get_native_balance(self, address: str) -> Decimal:
        """Get the native token balance in human-readable units (e.g. ETH)."""
        checksum = Web3.to_checksum_address(address)
        balance_wei = self.web3.eth.get_balance(checksum)
        return Decimal(str(Web3.from_wei(balance_wei, "ether")))

    def get_balance(self, address: str) -> WalletBalance:
        balance = self.get_native_balance(address)
        logger.debug("Balance of {}: {} {}", address, balance, self._native_symbol)
        return WalletBalance(
            address=Web3.to_checksum_address(address),
            native=str(balance),
            symbol=self._native_symbol,
            tokens=[],
        )

    def send_raw_transaction(self, raw_transaction: bytes) -> str:
        tx_hash = self.web3.eth.send_raw_transaction(raw_transaction)
        tx_hex = tx_hash.hex()
        if not tx_hex.startswith("0x"):
            tx_hex = f"0x{tx_hex}"
        return tx_hex
