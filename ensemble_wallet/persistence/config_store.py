"""Active wallet pointer stored in the CLI's JSON config file."""

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from loguru import logger

from ensemble_wallet.interfaces.config_store import BaseConfigStore

ACTIVE_WALLET_KEY = "activeWallet"


class JsonConfigStore(BaseConfigStore):
    """Config store backed by ``config.json``.

    Only the ``activeWallet`` key is owned here; every other key of the file
    (network, RPC URL, contract addresses) is read and written back untouched.

    Example:
        store = JsonConfigStore(Path.home() / ".ensemble" / "config.json")
        store.set_active_wallet("trading")
        store.get_active_wallet()  # "trading"
    """

    def __init__(self, config_path: Path) -> None:
        """Initialize the config store.

        Args:
            config_path: Path to the JSON config file. Created on first write.
        """
        self._config_path = Path(config_path)

    @property
    def config_path(self) -> Path:
        return self._config_path

    def get_active_wallet(self) -> str | None:
        value = self._read().get(ACTIVE_WALLET_KEY)
        return value if isinstance(value, str) and value else None

    def set_active_wallet(self, name: str) -> None:
        config = self._read()
        config[ACTIVE_WALLET_KEY] = name
        self._write(config)

    def clear_active_wallet(self) -> None:
        config = self._read()
        if ACTIVE_WALLET_KEY not in config:
            return
        del config[ACTIVE_WALLET_KEY]
        self._write(config)

    def _read(self) -> dict[str, Any]:
        if not self._config_path.exists():
            return {}
        try:
            data = json.loads(self._config_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
            logger.warning("Error reading config {}, using defaults: {}", self._config_path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Config {} is not a JSON object, using defaults", self._config_path)
            return {}
        return data

    def _write(self, config: dict[str, Any]) -> None:
        self._config_path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=".config.", suffix=".tmp", dir=self._config_path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(config, f, indent=2)
            os.replace(tmp_name, self._config_path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug("Wrote config: {}", self._config_path)
