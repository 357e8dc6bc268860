"""Persisted API credential."""

from pathlib import Path

import structlog

from weather_terminal.config import Settings
from weather_terminal.schemas import CredentialRecord

logger = structlog.get_logger()


class CredentialStore:
    """JSON-backed record holding the OpenWeatherMap API key."""

    def __init__(self, settings: Settings) -> None:
        """Load the record, creating the file with defaults if it is missing."""
        self._path = settings.resolve(settings.config_file)
        self._override = settings.api_key or None
        self._record = self._load()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> CredentialRecord:
        if not self._path.exists():
            record = CredentialRecord()
            self._save(record)
            return record

        try:
            return CredentialRecord.model_validate_json(self._path.read_bytes())
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable config file", path=str(self._path), error=str(e))
            return CredentialRecord()

    def _save(self, record: CredentialRecord) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(
                record.model_dump_json(by_alias=True, indent=2),
                encoding="utf-8",
            )
        except OSError as e:
            logger.error("Failed to save config file", path=str(self._path), error=str(e))

    @property
    def api_key(self) -> str | None:
        """Configured API key; the environment setting wins over the file."""
        return self._override or self._record.api_key or None

    def set_api_key(self, key: str) -> None:
        """Store a new API key and persist it immediately."""
        self._record = self._record.model_copy(update={"api_key": key})
        self._save(self._record)
