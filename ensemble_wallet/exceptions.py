"""Custom exceptions for the ensemble wallet manager."""


class WalletError(Exception):
    """Base exception for wallet-related errors.

    Attributes:
        code: Stable machine-readable error code for the CLI layer.
    """

    code: str = "WALLET_ERROR"

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code


# =============================================================================
# Store Exceptions
# =============================================================================


class WalletNotFoundError(WalletError):
    """Raised when a referenced wallet name has no record."""

    code = "WALLET_NOT_FOUND"

    def __init__(self, name: str) -> None:
        super().__init__(f"Wallet '{name}' not found")
        self.name = name


class WalletAlreadyExistsError(WalletError):
    """Raised when a create/import target name collides with a stored wallet."""

    code = "WALLET_EXISTS"

    def __init__(self, name: str) -> None:
        super().__init__(f"Wallet '{name}' already exists")
        self.name = name


class CorruptWalletError(WalletError):
    """Raised when a stored wallet file exists but cannot be parsed."""

    code = "CORRUPT_WALLET"

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"Wallet '{name}' is corrupt: {reason}")
        self.name = name
        self.reason = reason


class InvalidWalletNameError(WalletError):
    """Raised when a wallet name is not filesystem-safe."""

    code = "INVALID_WALLET_NAME"

    def __init__(self, name: str) -> None:
        super().__init__(
            f"Invalid wallet name '{name}': only letters, numbers, "
            "underscores, and hyphens are allowed"
        )
        self.name = name


# =============================================================================
# Credential Exceptions
# =============================================================================


class InvalidPasswordError(WalletError):
    """Raised when decryption fails its integrity or format check."""

    code = "INVALID_PASSWORD"

    def __init__(self) -> None:
        super().__init__("Invalid password")


class WeakPasswordError(WalletError):
    """Raised when a new storage or output password is too short."""

    code = "WEAK_PASSWORD"

    def __init__(self, min_length: int) -> None:
        super().__init__(f"Password must be at least {min_length} characters")
        self.min_length = min_length


class PasswordRequiredError(WalletError):
    """Raised when an operation needs a password that was not supplied."""

    code = "PASSWORD_REQUIRED"


# =============================================================================
# Secret Material Exceptions
# =============================================================================


class InvalidMnemonicError(WalletError):
    """Raised when a phrase fails wordlist or checksum validation."""

    code = "INVALID_MNEMONIC"

    def __init__(self) -> None:
        super().__init__("Invalid mnemonic phrase")


class InvalidPrivateKeyError(WalletError):
    """Raised when a private key is not a well-formed secp256k1 key."""

    code = "INVALID_PRIVATE_KEY"

    def __init__(self, reason: str | None = None) -> None:
        message = "Invalid private key"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class InvalidKeystoreError(WalletError):
    """Raised when a keystore document is malformed or its password is wrong."""

    code = "INVALID_KEYSTORE"

    def __init__(self, message: str = "Invalid keystore file or password") -> None:
        super().__init__(message)


class MissingImportDataError(WalletError):
    """Raised when an import names no secret to import."""

    code = "MISSING_IMPORT_DATA"

    def __init__(self) -> None:
        super().__init__(
            "Must provide either mnemonic, private key, or keystore data"
        )


class UnsupportedWalletKindError(WalletError):
    """Raised when a wallet kind cannot be used for the requested operation."""

    code = "UNSUPPORTED_WALLET_KIND"


class InvalidExportFormatError(WalletError):
    """Raised when a wallet cannot be exported in the requested format."""

    code = "INVALID_EXPORT_FORMAT"


# =============================================================================
# Resolution / Collaborator Exceptions
# =============================================================================


class NoActiveWalletError(WalletError):
    """Raised when no wallet was named and no active wallet is set."""

    code = "NO_ACTIVE_WALLET"

    def __init__(self) -> None:
        super().__init__(
            "No wallet specified and no active wallet set. Use --wallet <name> "
            'or set an active wallet with "ensemble wallets use <name>"'
        )


class ChainClientUnavailableError(WalletError):
    """Raised when a chain operation is requested without a chain client."""

    code = "CHAIN_CLIENT_UNAVAILABLE"

    def __init__(self) -> None:
        super().__init__("No chain client configured for balance or signing")


_HINTS: dict[type[WalletError], str] = {
    WalletNotFoundError: 'Use "ensemble wallets list" to see available wallets',
    WalletAlreadyExistsError: "Use a different name or delete the existing wallet first",
    CorruptWalletError: "Restore the wallet file from a backup or re-import the wallet from its secret",
    InvalidMnemonicError: "Please check your mnemonic phrase and try again",
    InvalidPrivateKeyError: "Private key must be a valid hex string",
    InvalidWalletNameError: "Wallet name can only contain letters, numbers, underscores, and hyphens",
    NoActiveWalletError: 'Set an active wallet with "ensemble wallets use <name>"',
}


def error_hint(exc: BaseException) -> str | None:
    """Return the operator hint printed beneath an error message, if any."""
    for error_type, hint in _HINTS.items():
        if isinstance(exc, error_type):
            return hint
    return None
