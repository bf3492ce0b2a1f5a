"""Loading and layering of anonymization documents.

A document is a JSON object mapping table names to objects that map column
names to replacement values. The base document is read first, then every
overlay is deep-merged onto it in the order given.
"""

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from prod2testing.anonymization.exceptions import ConfigError
from prod2testing.anonymization.models import AnonymizationConfig, parse_replacement
from prod2testing.logging.logger import Log

DEFAULT_CONFIG_PATH = Path(__file__).parent / "default_anonymization.json"


def deep_merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Return *base* with *overlay* merged on top, without mutating either.

    Nested mappings present on both sides merge recursively; any other
    overlay value replaces the base value outright.
    """
    merged = dict(base)
    for key, value in overlay.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


class ConfigLoader:
    """Reads a base document plus overlays into one AnonymizationConfig."""

    def load(
        self,
        base_path: Path | None = None,
        overlay_paths: Iterable[Path] = (),
    ) -> AnonymizationConfig:
        """Load, merge and parse anonymization documents.

        Args:
            base_path: Base document. Defaults to the bundled document.
            overlay_paths: Documents merged onto the base, later ones winning.

        Returns:
            Table name -> column name -> tagged replacement value.

        Raises:
            ConfigError: if any document is missing, unreadable, invalid JSON,
                or not shaped as table -> column -> scalar.
        """
        path = base_path or DEFAULT_CONFIG_PATH
        raw = self._read(path)
        Log.debug(f"Loaded base anonymization config {path}")

        for overlay_path in overlay_paths:
            raw = deep_merge(raw, self._read(overlay_path))
            Log.debug(f"Merged additional anonymization config {overlay_path}")

        return self._parse(raw)

    @staticmethod
    def _read(path: Path) -> dict[str, Any]:
        if not path.is_file():
            raise ConfigError(f"The anonymization config '{path}' does not exist")
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"The anonymization config '{path}' is not readable: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise ConfigError(
                f"The anonymization config '{path}' is not valid UTF-8: {exc}"
            ) from exc
        try:
            document = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigError(
                f"The anonymization config '{path}' contains invalid json: {exc}"
            ) from exc
        if not isinstance(document, dict) or not document:
            raise ConfigError(
                f"The anonymization config '{path}' must be a non-empty JSON object"
            )
        return document

    @staticmethod
    def _parse(raw: dict[str, Any]) -> AnonymizationConfig:
        config: AnonymizationConfig = {}
        for table, columns in raw.items():
            if not isinstance(columns, dict):
                raise ConfigError(
                    f"The configuration of table '{table}' must be an object of columns"
                )
            spec = {}
            for column, value in columns.items():
                if isinstance(value, (dict, list)):
                    raise ConfigError(
                        f"The replacement for '{table}.{column}' must be a string, "
                        "number or null"
                    )
                spec[column] = parse_replacement(value)
            config[table] = spec
        return config
