"""File-backed storage for encrypted wallet records.

One JSON file per wallet, named ``<name>.json``, under a single directory.
Records are written once and never modified; a new secret means a new record.
"""

import json
import os
import re
import tempfile
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from ensemble_wallet.exceptions import (
    CorruptWalletError,
    InvalidWalletNameError,
    WalletAlreadyExistsError,
    WalletNotFoundError,
)
from ensemble_wallet.models import WalletRecord
from ensemble_wallet.wallet.cipher import IV_LENGTH, SALT_LENGTH, parse_ciphertext, parse_hex

WALLET_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")


def validate_wallet_name(name: str) -> str:
    """Return the name unchanged if it is filesystem-safe.

    Raises:
        InvalidWalletNameError: If the name contains anything other than
            letters, numbers, underscores, and hyphens.
    """
    if not isinstance(name, str) or not WALLET_NAME_PATTERN.match(name):
        raise InvalidWalletNameError(str(name))
    return name


class WalletStore:
    """Reads and writes wallet records in a directory.

    Usage:
        store = WalletStore(Path("~/.ensemble/wallets").expanduser())
        store.save(record)
        record = store.load("trading")
        for record in store.list():
            print(record.name, record.address)
    """

    SUFFIX = ".json"

    def __init__(self, wallet_dir: Path) -> None:
        """Initialize the store.

        Args:
            wallet_dir: Directory holding wallet files. Created lazily on
                first save.
        """
        self._wallet_dir = Path(wallet_dir)

    @property
    def wallet_dir(self) -> Path:
        """Get the wallet storage directory."""
        return self._wallet_dir

    def path_for(self, name: str) -> Path:
        """Return the file path for a wallet name."""
        return self._wallet_dir / f"{validate_wallet_name(name)}{self.SUFFIX}"

    def exists(self, name: str) -> bool:
        """Check whether a record file exists for the name."""
        return self.path_for(name).exists()

    def save(self, record: WalletRecord) -> Path:
        """Persist a new record.

        The record is written to a temporary file in the same directory and
        hard-linked into place, so the target either appears complete or not
        at all, and an existing file is never overwritten.

        Raises:
            WalletAlreadyExistsError: If a record with this name exists.
        """
        target = self.path_for(record.name)
        if target.exists():
            raise WalletAlreadyExistsError(record.name)

        self._wallet_dir.mkdir(mode=0o700, parents=True, exist_ok=True)

        payload = json.dumps(record.to_json_dict(), indent=2)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{record.name}.", suffix=".tmp", dir=self._wallet_dir
        )
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_path, 0o600)
            try:
                os.link(tmp_path, target)
            except FileExistsError:
                raise WalletAlreadyExistsError(record.name) from None
        finally:
            tmp_path.unlink(missing_ok=True)

        logger.debug("Saved wallet record: {} -> {}", record.name, target)
        return target

    def load(self, name: str) -> WalletRecord:
        """Load a record by name.

        Raises:
            WalletNotFoundError: If no record exists.
            CorruptWalletError: If the file is not a well-formed record.
        """
        path = self.path_for(name)
        if not path.exists():
            raise WalletNotFoundError(name)
        return self._read(path, name)

    def list(self) -> list[WalletRecord]:
        """Return all well-formed records, sorted by name.

        Malformed files are skipped with a warning.
        """
        if not self._wallet_dir.is_dir():
            return []

        records = []
        for wallet_file in sorted(self._wallet_dir.glob(f"*{self.SUFFIX}")):
            name = wallet_file.stem
            if not WALLET_NAME_PATTERN.match(name):
                logger.warning("Skipping wallet file with invalid name: {}", wallet_file)
                continue
            try:
                records.append(self._read(wallet_file, name))
            except CorruptWalletError as e:
                logger.warning("Skipping invalid wallet file {}: {}", wallet_file, e.reason)
            except OSError as e:
                logger.warning("Failed to read wallet file {}: {}", wallet_file, e)

        return sorted(records, key=lambda r: r.name)

    def remove(self, name: str) -> None:
        """Delete a record file. Authorization is the caller's job.

        Raises:
            WalletNotFoundError: If no record exists.
        """
        path = self.path_for(name)
        try:
            path.unlink()
        except FileNotFoundError:
            raise WalletNotFoundError(name) from None
        logger.debug("Removed wallet record: {}", path)

    def _read(self, path: Path, name: str) -> WalletRecord:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise CorruptWalletError(name, f"invalid JSON ({e})") from e

        if not isinstance(data, dict):
            raise CorruptWalletError(name, "record is not a JSON object")

        try:
            record = WalletRecord.model_validate(data)
        except ValidationError as e:
            raise CorruptWalletError(name, f"{e.error_count()} invalid field(s)") from e

        if record.name != name:
            raise CorruptWalletError(
                name, f"file holds record for '{record.name}'"
            )

        try:
            parse_hex(record.salt, SALT_LENGTH, "salt")
            parse_hex(record.iv, IV_LENGTH, "iv")
            parse_ciphertext(record.encrypted_data)
        except ValueError as e:
            raise CorruptWalletError(name, str(e)) from e
        return record
