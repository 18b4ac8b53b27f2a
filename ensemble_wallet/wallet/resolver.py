"""Active wallet resolution.

Priority: explicit override > active wallet pointer > nothing.
"""

from loguru import logger

from ensemble_wallet.exceptions import NoActiveWalletError, WalletNotFoundError
from ensemble_wallet.interfaces.config_store import BaseConfigStore
from ensemble_wallet.wallet.manager import WalletManager


def resolve_wallet(config_store: BaseConfigStore, override: str | None = None) -> str | None:
    """Return the wallet name an operation should use, or None."""
    if override:
        return override
    return config_store.get_active_wallet()


def resolve_wallet_or_fail(config_store: BaseConfigStore, override: str | None = None) -> str:
    """Return the wallet name an operation should use.

    Raises:
        NoActiveWalletError: If no override is given and no active wallet is set.
    """
    name = resolve_wallet(config_store, override)
    if not name:
        raise NoActiveWalletError()
    return name


def use_wallet(manager: WalletManager, name: str) -> str:
    """Make a stored wallet the active one.

    Returns:
        The wallet's address.

    Raises:
        WalletNotFoundError: If no wallet has this name.
    """
    address = manager.get_address(name)
    manager.config_store.set_active_wallet(name)
    logger.info("Active wallet set to {} ({})", name, address)
    return address


def current_wallet(manager: WalletManager) -> tuple[str, str] | None:
    """Return the active wallet's name and address, or None if unset.

    A pointer to a wallet that no longer exists is cleared before
    WalletNotFoundError is raised.
    """
    name = manager.config_store.get_active_wallet()
    if not name:
        return None

    try:
        address = manager.get_address(name)
    except WalletNotFoundError:
        logger.warning("Active wallet {} no longer exists, clearing pointer", name)
        manager.config_store.clear_active_wallet()
        raise

    return name, address
