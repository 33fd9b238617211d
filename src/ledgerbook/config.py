"""Configuration management for ledgerbook."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, replace
from pathlib import Path

from ledgerbook.exceptions import ConfigError
from ledgerbook.models.currency import CurrencyCode


def _get_config_dir() -> Path:
    """Get XDG-compliant config directory."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / "ledgerbook"
    return Path.home() / ".config" / "ledgerbook"


def _get_data_dir() -> Path:
    """Get XDG-compliant data directory for stored books."""
    xdg_data = os.environ.get("XDG_DATA_HOME")
    if xdg_data:
        return Path(xdg_data) / "ledgerbook"
    return Path.home() / ".local" / "share" / "ledgerbook"


@dataclass(frozen=True, slots=True)
class LedgerbookConfig:
    """Ledgerbook settings.

    Attributes:
        default_currency: Currency for new books and ledgers.
        data_dir: Where the JSON book store keeps its files.
        active_days: Look-back window for "active" accounts.
        max_tags: Tag count above which entry validation warns.
    """

    default_currency: CurrencyCode = CurrencyCode.CNY
    data_dir: Path = field(default_factory=_get_data_dir)
    active_days: int = 90
    max_tags: int = 10

    @classmethod
    def from_env(cls, base: LedgerbookConfig | None = None) -> LedgerbookConfig:
        """Apply environment variable overrides on top of ``base``.

        Recognized env vars:
        - LEDGERBOOK_DEFAULT_CURRENCY
        - LEDGERBOOK_DATA_DIR
        - LEDGERBOOK_ACTIVE_DAYS
        """
        config = base or cls()

        if currency := os.environ.get("LEDGERBOOK_DEFAULT_CURRENCY"):
            try:
                config = replace(config, default_currency=CurrencyCode(currency.upper()))
            except ValueError:
                msg = f"Unsupported currency in LEDGERBOOK_DEFAULT_CURRENCY: {currency}"
                raise ConfigError(msg) from None

        if data_dir := os.environ.get("LEDGERBOOK_DATA_DIR"):
            config = replace(config, data_dir=Path(data_dir))

        if active_days := os.environ.get("LEDGERBOOK_ACTIVE_DAYS"):
            try:
                config = replace(config, active_days=int(active_days))
            except ValueError:
                msg = f"LEDGERBOOK_ACTIVE_DAYS must be an integer, got {active_days!r}"
                raise ConfigError(msg) from None

        return config

    @classmethod
    def from_file(cls, path: Path | None = None) -> LedgerbookConfig:
        """Load config from JSON file.

        Default path: ~/.config/ledgerbook/config.json

        Expected format:
        {
            "default_currency": "USD",
            "data_dir": "/srv/books",
            "active_days": 60,
            "max_tags": 10
        }
        """
        if path is None:
            path = _get_config_dir() / "config.json"

        if not path.exists():
            msg = f"Config file not found: {path}"
            raise ConfigError(msg, path=str(path))

        try:
            with path.open() as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            msg = f"Failed to read {path}: {e}"
            raise ConfigError(msg, path=str(path)) from e

        kwargs: dict[str, object] = {}
        try:
            if "default_currency" in data:
                kwargs["default_currency"] = CurrencyCode(str(data["default_currency"]).upper())
            if "data_dir" in data:
                kwargs["data_dir"] = Path(data["data_dir"])
            if "active_days" in data:
                kwargs["active_days"] = int(data["active_days"])
            if "max_tags" in data:
                kwargs["max_tags"] = int(data["max_tags"])
        except ValueError as e:
            msg = f"Invalid value in {path}: {e}"
            raise ConfigError(msg, path=str(path)) from e

        return cls(**kwargs)  # type: ignore[arg-type]

    @classmethod
    def load(cls, path: Path | None = None) -> LedgerbookConfig:
        """Load config from file (if present) with environment overrides.

        Env vars take precedence over file values.
        """
        try:
            base = cls.from_file(path)
        except ConfigError as e:
            if path is not None or Path(e.path or "").exists():
                raise
            base = cls()
        return cls.from_env(base)
