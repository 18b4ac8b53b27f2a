"""Domain models for the ensemble wallet manager."""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field, SecretStr, field_validator

RECORD_VERSION = "1.0.0"
SUPPORTED_FORMAT_VERSIONS = frozenset({1})


class WalletKind(str, Enum):
    """Which secret a wallet record encrypts."""

    MNEMONIC = "mnemonic"
    PRIVATE_KEY = "private-key"
    KEYSTORE = "keystore"


class ExportFormat(str, Enum):
    """Representation requested from an export."""

    MNEMONIC = "mnemonic"
    PRIVATE_KEY = "private-key"
    KEYSTORE = "keystore"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WalletRecord(BaseModel):
    """Persisted wallet: encrypted secret plus public metadata.

    Immutable once written. Field aliases match the on-disk JSON keys.
    """

    model_config = {"frozen": True, "populate_by_name": True, "extra": "ignore"}

    name: str = Field(..., min_length=1, description="Unique wallet name")
    address: str = Field(..., description="Checksummed address derived from the secret")
    encrypted_data: str = Field(
        ..., alias="encryptedData", min_length=1, description="Base64 AES-CBC ciphertext"
    )
    salt: str = Field(..., min_length=1, description="Hex PBKDF2 salt")
    iv: str = Field(..., min_length=1, description="Hex AES initialisation vector")
    kind: WalletKind = Field(..., alias="type", description="Secret kind")
    created_at: datetime = Field(default_factory=_utcnow, alias="createdAt")
    version: str = Field(default=RECORD_VERSION, description="Record format version")

    @field_validator("version")
    @classmethod
    def _check_version(cls, value: str) -> str:
        major = value.split(".", 1)[0]
        if not major.isdigit() or int(major) not in SUPPORTED_FORMAT_VERSIONS:
            raise ValueError(f"unsupported record version {value!r}")
        return value

    @property
    def format_version(self) -> int:
        """Major component of the record version."""
        return int(self.version.split(".", 1)[0])

    def to_json_dict(self) -> dict:
        """Serialize with on-disk keys and an ISO-8601 timestamp."""
        return self.model_dump(mode="json", by_alias=True)


class WalletSummary(BaseModel):
    """Metadata view of a wallet, produced without decryption."""

    model_config = {"frozen": True}

    name: str
    address: str
    kind: WalletKind
    created_at: datetime

    @classmethod
    def from_record(cls, record: WalletRecord) -> "WalletSummary":
        return cls(
            name=record.name,
            address=record.address,
            kind=record.kind,
            created_at=record.created_at,
        )


class CreatedWallet(BaseModel):
    """Result of creating a wallet.

    The mnemonic is present only for mnemonic wallets and is the single
    moment the phrase is handed back without a password.
    """

    model_config = {"frozen": True}

    name: str
    address: str
    kind: WalletKind
    mnemonic: SecretStr | None = None


class TokenBalance(BaseModel):
    """Balance of a single ERC-20 token."""

    model_config = {"frozen": True}

    symbol: str
    name: str
    address: str
    balance: str
    decimals: int = Field(default=18, ge=0)


class WalletBalance(BaseModel):
    """Balance answer from a chain client."""

    model_config = {"frozen": True}

    address: str
    native: str = Field(..., description="Native balance in ether units")
    symbol: str = "ETH"
    tokens: list[TokenBalance] = Field(default_factory=list)
