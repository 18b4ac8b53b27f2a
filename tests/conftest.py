"""Shared fixtures and collaborator fakes for wallet tests."""

from pathlib import Path

import pytest

from ensemble_wallet.interfaces.chain_client import BaseChainClient
from ensemble_wallet.interfaces.config_store import BaseConfigStore
from ensemble_wallet.models import WalletBalance
from ensemble_wallet.wallet import WalletManager, WalletStore

# Hardhat account #0: both secrets below derive this address
TEST_MNEMONIC = "test test test test test test test test test test test junk"
TEST_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
TEST_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"


class InMemoryConfigStore(BaseConfigStore):
    """Config store that keeps the pointer in memory."""

    def __init__(self, active: str | None = None) -> None:
        self.active = active

    def get_active_wallet(self) -> str | None:
        return self.active

    def set_active_wallet(self, name: str) -> None:
        self.active = name

    def clear_active_wallet(self) -> None:
        self.active = None


class FakeChainClient(BaseChainClient):
    """Chain client returning canned balances and recording broadcasts."""

    def __init__(self, native: str = "1.5") -> None:
        self.native = native
        self.balance_requests: list[str] = []
        self.sent: list[bytes] = []

    def get_balance(self, address: str) -> WalletBalance:
        self.balance_requests.append(address)
        return WalletBalance(address=address, native=self.native)

    def send_raw_transaction(self, raw_transaction: bytes) -> str:
        self.sent.append(raw_transaction)
        return "0x" + "ab" * 32


@pytest.fixture
def wallet_dir(tmp_path: Path) -> Path:
    """Wallet directory that does not exist yet."""
    return tmp_path / "wallets"


@pytest.fixture
def store(wallet_dir: Path) -> WalletStore:
    return WalletStore(wallet_dir)


@pytest.fixture
def config_store() -> InMemoryConfigStore:
    return InMemoryConfigStore()


@pytest.fixture
def chain_client() -> FakeChainClient:
    return FakeChainClient()


@pytest.fixture
def manager(
    store: WalletStore, config_store: InMemoryConfigStore, chain_client: FakeChainClient
) -> WalletManager:
    return WalletManager(store, config_store, chain_client)
