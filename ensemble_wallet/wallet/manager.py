"""Wallet lifecycle management with password-encrypted record storage.

Each wallet is a named record holding one encrypted secret (a mnemonic phrase
or a private key) plus its public address. Secrets are decrypted only inside
the operation that needs them and are never cached by the manager.
"""

import json
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from eth_account import Account
from eth_account.datastructures import SignedMessage, SignedTransaction
from eth_account.messages import encode_defunct
from eth_account.signers.local import LocalAccount
from loguru import logger
from pydantic import SecretStr

from ensemble_wallet.exceptions import (
    ChainClientUnavailableError,
    CorruptWalletError,
    InvalidExportFormatError,
    InvalidKeystoreError,
    InvalidMnemonicError,
    InvalidPasswordError,
    InvalidPrivateKeyError,
    MissingImportDataError,
    PasswordRequiredError,
    UnsupportedWalletKindError,
    WalletAlreadyExistsError,
    WalletError,
    WeakPasswordError,
)
from ensemble_wallet.interfaces.chain_client import BaseChainClient
from ensemble_wallet.interfaces.config_store import BaseConfigStore
from ensemble_wallet.models import (
    CreatedWallet,
    ExportFormat,
    WalletBalance,
    WalletKind,
    WalletRecord,
    WalletSummary,
)
from ensemble_wallet.wallet import cipher, mnemonic
from ensemble_wallet.wallet.store import WalletStore

MIN_PASSWORD_LENGTH = 8

_PRIVATE_KEY_HEX = re.compile(r"^[0-9a-fA-F]{64}$")
_ADDRESS_HEX = re.compile(r"^0x[0-9a-fA-F]{40}$")


def _key_hex(account: LocalAccount) -> str:
    """Return the account's private key as 0x-prefixed hex."""
    private_key_hex = account.key.hex()
    if not private_key_hex.startswith("0x"):
        private_key_hex = f"0x{private_key_hex}"
    return private_key_hex


def parse_private_key(private_key: str) -> LocalAccount:
    """Build an account from a hex private key, with or without 0x prefix.

    Raises:
        InvalidPrivateKeyError: If the key is not 64 hex characters or is
            not a valid secp256k1 scalar.
    """
    if not isinstance(private_key, str):
        raise InvalidPrivateKeyError("must be a hex string")

    key = private_key.strip()
    if key[:2].lower() == "0x":
        key = key[2:]

    if len(key) != 64:
        raise InvalidPrivateKeyError("must be 64 hex characters (with optional 0x prefix)")
    if not _PRIVATE_KEY_HEX.match(key):
        raise InvalidPrivateKeyError("must be valid hexadecimal")

    try:
        return Account.from_key(f"0x{key.lower()}")
    except Exception as e:
        raise InvalidPrivateKeyError(str(e)) from e


def is_address(value: str) -> bool:
    """Check whether a string looks like a 0x address rather than a wallet name."""
    return bool(_ADDRESS_HEX.match(value))


def _check_new_password(password: str) -> None:
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        raise WeakPasswordError(MIN_PASSWORD_LENGTH)


@dataclass
class UnlockedWallet:
    """Decrypted key material for a single operation.

    Never persisted. The secret is wrapped in SecretStr so it does not
    appear in reprs or log output.
    """

    name: str
    kind: WalletKind
    secret: SecretStr
    account: LocalAccount = field(repr=False)

    @property
    def address(self) -> str:
        return self.account.address

    @property
    def private_key(self) -> SecretStr:
        """Private key as 0x-prefixed hex."""
        return SecretStr(_key_hex(self.account))

    @property
    def short_address(self) -> str:
        """Return shortened address for display (0x1234...5678)."""
        return f"{self.address[:6]}...{self.address[-4:]}"


class Signer:
    """A decrypted account bound to a chain client for one signing operation.

    The caller must not persist or log a Signer.
    """

    def __init__(self, account: LocalAccount, chain_client: BaseChainClient) -> None:
        self._account = account
        self._chain_client = chain_client

    def __repr__(self) -> str:
        return f"Signer(address={self.address!r})"

    @property
    def address(self) -> str:
        return self._account.address

    @property
    def chain_client(self) -> BaseChainClient:
        return self._chain_client

    def sign_transaction(self, transaction: dict[str, Any]) -> SignedTransaction:
        """Sign a fully built transaction dict."""
        return self._account.sign_transaction(transaction)

    def sign_message(self, message: str) -> SignedMessage:
        """Sign a text message (EIP-191 personal_sign)."""
        return self._account.sign_message(encode_defunct(text=message))

    def send_transaction(self, transaction: dict[str, Any]) -> str:
        """Sign a transaction and broadcast it through the chain client.

        Returns:
            Transaction hash as a 0x-prefixed hex string.
        """
        signed = self.sign_transaction(transaction)
        tx_hash = self._chain_client.send_raw_transaction(bytes(signed.raw_transaction))
        logger.info("Broadcast transaction from {}: {}", self.address, tx_hash)
        return tx_hash


class WalletManager:
    """Manages wallet creation, storage, export, and deletion.

    Wallets are stored as one password-encrypted JSON record per name.
    The active wallet pointer lives in the injected config store, not here.

    Usage:
        manager = WalletManager(WalletStore(wallet_dir), JsonConfigStore(config_file))

        # Create new wallet
        created = manager.create_wallet("trading", "my_password")
        print(created.address, created.mnemonic.get_secret_value())

        # Export private key
        key = manager.export_wallet("trading", "my_password", ExportFormat.PRIVATE_KEY)
    """

    def __init__(
        self,
        store: WalletStore,
        config_store: BaseConfigStore,
        chain_client: BaseChainClient | None = None,
    ) -> None:
        """Initialize wallet manager.

        Args:
            store: Record store for encrypted wallets.
            config_store: Holder of the active wallet pointer.
            chain_client: Balance and broadcast provider. Optional for
                purely local operations.
        """
        self._store = store
        self._config_store = config_store
        self._chain_client = chain_client

    @property
    def store(self) -> WalletStore:
        return self._store

    @property
    def config_store(self) -> BaseConfigStore:
        return self._config_store

    # ------------------------------------------------------------------
    # Wallet lifecycle
    # ------------------------------------------------------------------

    def create_wallet(
        self, name: str, password: str, kind: WalletKind | str = WalletKind.MNEMONIC
    ) -> CreatedWallet:
        """Create a new wallet with an encrypted record.

        Args:
            name: Unique wallet name.
            password: Password to encrypt the record.
            kind: ``mnemonic`` (default) or ``private-key``.

        Returns:
            The new wallet's address, and its phrase for mnemonic wallets.

        Raises:
            WalletAlreadyExistsError: If the name is taken.
            WeakPasswordError: If password is too short.
            UnsupportedWalletKindError: If kind is ``keystore``.
        """
        try:
            kind = WalletKind(kind)
        except ValueError:
            raise UnsupportedWalletKindError(f"Unknown wallet type: {kind}") from None
        if kind is WalletKind.KEYSTORE:
            raise UnsupportedWalletKindError(
                "Keystore wallets can only be imported, not created"
            )
        if self._store.exists(name):
            raise WalletAlreadyExistsError(name)
        _check_new_password(password)

        phrase: str | None = None
        if kind is WalletKind.MNEMONIC:
            phrase = mnemonic.generate()
            account = mnemonic.derive_account(phrase)
            secret = phrase
        else:
            account = Account.create()
            secret = _key_hex(account)

        self._persist(name, password, kind, account.address, secret)
        logger.info("Created new {} wallet: {} ({})", kind.value, name, account.address)

        return CreatedWallet(
            name=name,
            address=account.address,
            kind=kind,
            mnemonic=SecretStr(phrase) if phrase is not None else None,
        )

    def import_wallet(
        self,
        name: str,
        password: str,
        *,
        mnemonic_phrase: str | None = None,
        private_key: str | None = None,
        keystore: str | Path | Mapping[str, Any] | None = None,
        keystore_password: str | None = None,
    ) -> str:
        """Import an existing secret as a new wallet.

        Exactly one of ``mnemonic_phrase``, ``private_key`` or ``keystore``
        must be given.

        Returns:
            The imported wallet's address.

        Raises:
            WalletAlreadyExistsError: If the name is taken.
            InvalidMnemonicError: If the phrase fails validation.
            InvalidPrivateKeyError: If the key is malformed.
            InvalidKeystoreError: If the keystore cannot be opened.
            MissingImportDataError: If no secret was given.
        """
        sources = [s for s in (mnemonic_phrase, private_key, keystore) if s]
        if not sources:
            raise MissingImportDataError()
        if len(sources) > 1:
            raise WalletError(
                "Provide only one of mnemonic, private key, or keystore",
                code="AMBIGUOUS_IMPORT_DATA",
            )
        if self._store.exists(name):
            raise WalletAlreadyExistsError(name)
        _check_new_password(password)

        if mnemonic_phrase:
            account = mnemonic.derive_account(mnemonic_phrase)
            kind, secret = WalletKind.MNEMONIC, mnemonic.normalize(mnemonic_phrase)
        elif private_key:
            account = parse_private_key(private_key)
            kind, secret = WalletKind.PRIVATE_KEY, _key_hex(account)
        else:
            if not keystore_password:
                raise PasswordRequiredError("Password required for keystore import")
            account = self._open_keystore(keystore, keystore_password)
            kind, secret = WalletKind.KEYSTORE, _key_hex(account)

        self._persist(name, password, kind, account.address, secret)
        logger.info("Imported {} wallet: {} ({})", kind.value, name, account.address)
        return account.address

    def list_wallets(self) -> list[WalletSummary]:
        """List all stored wallets without decrypting anything."""
        return [WalletSummary.from_record(r) for r in self._store.list()]

    def has_wallets(self) -> bool:
        """Check if any wallets exist."""
        return len(self._store.list()) > 0

    def wallet_exists(self, name: str) -> bool:
        """Check if a wallet with the given name exists."""
        return self._store.exists(name)

    def export_wallet(
        self,
        name: str,
        password: str,
        fmt: ExportFormat | str,
        output_password: str | None = None,
    ) -> str:
        """Export a wallet's secret.

        Args:
            name: Wallet name.
            password: Storage password of the wallet.
            fmt: ``mnemonic``, ``private-key``, or ``keystore``.
            output_password: New password for ``keystore`` exports,
                independent of the storage password.

        Returns:
            The phrase, the 0x private key, or keystore JSON text.

        Raises:
            InvalidPasswordError: If the password is wrong.
            InvalidExportFormatError: If a phrase is requested from a
                wallet that has none, or the format is unknown.
            PasswordRequiredError: If a keystore export has no output password.
        """
        try:
            fmt = ExportFormat(fmt)
        except ValueError:
            raise InvalidExportFormatError(f"Unsupported export format: {fmt}") from None

        if fmt is ExportFormat.KEYSTORE:
            if not output_password:
                raise PasswordRequiredError("Password required for keystore export")
            _check_new_password(output_password)

        unlocked = self.unlock(name, password)

        if fmt is ExportFormat.MNEMONIC:
            if unlocked.kind is not WalletKind.MNEMONIC:
                raise InvalidExportFormatError(
                    "Cannot export mnemonic for wallet not created from mnemonic"
                )
            result = unlocked.secret.get_secret_value()
        elif fmt is ExportFormat.PRIVATE_KEY:
            result = unlocked.private_key.get_secret_value()
        else:
            result = json.dumps(Account.encrypt(unlocked.account.key, output_password))

        logger.info("Exported wallet {} as {}", name, fmt.value)
        return result

    def delete_wallet(self, name: str, password: str) -> None:
        """Delete a wallet after proving ownership with its password.

        Clears the active wallet pointer if it named this wallet.

        Raises:
            WalletNotFoundError: If the wallet does not exist.
            InvalidPasswordError: If the password is wrong.
        """
        self.unlock(name, password)
        self._store.remove(name)
        logger.info("Deleted wallet: {}", name)

        if self._config_store.get_active_wallet() == name:
            self._config_store.clear_active_wallet()
            logger.info("Cleared active wallet pointer for deleted wallet {}", name)

    # ------------------------------------------------------------------
    # Metadata and chain queries
    # ------------------------------------------------------------------

    def get_address(self, name: str) -> str:
        """Return a wallet's address without decrypting."""
        return self._store.load(name).address

    def get_balance(self, name_or_address: str) -> WalletBalance:
        """Fetch the balance of a wallet name or a raw 0x address."""
        if self._chain_client is None:
            raise ChainClientUnavailableError()

        if is_address(name_or_address):
            address = name_or_address
        else:
            address = self.get_address(name_or_address)

        logger.debug("Fetching balance for {}", address)
        return self._chain_client.get_balance(address)

    def get_signer(self, name: str, password: str) -> Signer:
        """Decrypt a wallet and bind it to the chain client for signing."""
        if self._chain_client is None:
            raise ChainClientUnavailableError()
        unlocked = self.unlock(name, password)
        return Signer(unlocked.account, self._chain_client)

    # ------------------------------------------------------------------
    # Decryption
    # ------------------------------------------------------------------

    def unlock(self, name: str, password: str) -> UnlockedWallet:
        """Load, decrypt, and verify a wallet.

        The recovered secret must rebuild the recorded address.

        Raises:
            WalletNotFoundError: If the wallet does not exist.
            CorruptWalletError: If the record is malformed, or a well-formed
                secret does not match the recorded address.
            InvalidPasswordError: If the password is wrong.
        """
        record = self._store.load(name)
        sealed = cipher.SealedSecret(
            encrypted_data=record.encrypted_data, salt=record.salt, iv=record.iv
        )

        try:
            secret = cipher.unseal(sealed, password)
            if record.kind is WalletKind.MNEMONIC:
                account = mnemonic.derive_account(secret)
            else:
                account = parse_private_key(secret)
        except (InvalidPasswordError, InvalidMnemonicError, InvalidPrivateKeyError):
            logger.warning("Failed to unlock wallet {}: invalid password", name)
            raise InvalidPasswordError() from None

        if account.address.lower() != record.address.lower():
            raise CorruptWalletError(name, "decrypted secret does not match recorded address")

        logger.debug("Unlocked wallet: {}", name)
        return UnlockedWallet(
            name=name, kind=record.kind, secret=SecretStr(secret), account=account
        )

    def _persist(
        self, name: str, password: str, kind: WalletKind, address: str, secret: str
    ) -> WalletRecord:
        sealed = cipher.seal(secret, password)
        record = WalletRecord(
            name=name,
            address=address,
            encrypted_data=sealed.encrypted_data,
            salt=sealed.salt,
            iv=sealed.iv,
            kind=kind,
        )
        self._store.save(record)
        return record

    @staticmethod
    def _open_keystore(
        keystore: str | Path | Mapping[str, Any], keystore_password: str
    ) -> LocalAccount:
        if isinstance(keystore, Mapping):
            data = dict(keystore)
        else:
            text = keystore if isinstance(keystore, str) else ""
            if isinstance(keystore, Path) or not text.lstrip().startswith("{"):
                keystore_path = Path(keystore)
                try:
                    if not keystore_path.is_file():
                        raise InvalidKeystoreError(f"Keystore file not found: {keystore_path}")
                    text = keystore_path.read_text(encoding="utf-8")
                except (OSError, UnicodeDecodeError) as e:
                    raise InvalidKeystoreError(f"Cannot read keystore file: {e}") from e
            try:
                data = json.loads(text)
            except json.JSONDecodeError as e:
                raise InvalidKeystoreError(f"Invalid keystore JSON: {e}") from e

        if not isinstance(data, dict):
            raise InvalidKeystoreError("Invalid keystore: not a JSON object")
        if "crypto" not in data and "Crypto" not in data:
            raise InvalidKeystoreError("Invalid keystore: missing 'crypto' field")

        try:
            private_key = Account.decrypt(data, keystore_password)
        except (ValueError, KeyError, TypeError) as e:
            raise InvalidKeystoreError(f"Wrong password or corrupted keystore: {e}") from e

        return Account.from_key(private_key)
