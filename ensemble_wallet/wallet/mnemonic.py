"""Mnemonic phrase generation and validation (BIP-39, English wordlist)."""

from eth_account import Account
from eth_account.signers.local import LocalAccount
from mnemonic import Mnemonic

from ensemble_wallet.exceptions import InvalidMnemonicError

# Required for Account.from_mnemonic
Account.enable_unaudited_hdwallet_features()

DEFAULT_ACCOUNT_PATH = "m/44'/60'/0'/0/0"
DEFAULT_STRENGTH = 128  # 12 words

_mnemo = Mnemonic("english")


def normalize(phrase: str) -> str:
    """Collapse whitespace and lowercase a phrase."""
    return " ".join(phrase.lower().split())


def generate(strength: int = DEFAULT_STRENGTH) -> str:
    """Generate a new random mnemonic phrase.

    Args:
        strength: Entropy bits (128, 160, 192, 224, 256).
            128 bits = 12 words, 256 bits = 24 words.

    Returns:
        Space-separated mnemonic phrase.
    """
    return _mnemo.generate(strength=strength)


def validate(phrase: str) -> bool:
    """Check wordlist membership and checksum of a phrase. Never raises."""
    if not isinstance(phrase, str) or not phrase.strip():
        return False
    try:
        return _mnemo.check(normalize(phrase))
    except (ValueError, LookupError):
        return False


def derive_account(phrase: str, account_path: str = DEFAULT_ACCOUNT_PATH) -> LocalAccount:
    """Derive the signing account for a phrase.

    The phrase is validated first so a mistyped phrase never yields an address.

    Raises:
        InvalidMnemonicError: If the phrase fails validation.
    """
    if not validate(phrase):
        raise InvalidMnemonicError()
    return Account.from_mnemonic(normalize(phrase), account_path=account_path)
