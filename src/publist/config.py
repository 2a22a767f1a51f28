"""Rendering configuration for publication lists."""

from dataclasses import dataclass
from pathlib import Path

import msgspec

from .exceptions import FileOperationError, InvalidDataError


@dataclass
class RenderConfig:
    """Options controlling how the publication list is rendered."""

    container_id: str = "publication-list"
    counter_id: str = "publication-count"
    highlight: str = ""
    sort_by_year: bool = True
    group_by_year: bool = False

    @classmethod
    def from_file(cls, config_path: Path) -> "RenderConfig":
        """Load configuration from a JSON file.

        Keys that are not given keep their defaults.

        Args:
            config_path: Path to a JSON object with ``RenderConfig`` fields

        Returns:
            RenderConfig with values from the file

        Raises:
            FileOperationError: If the file cannot be read
            InvalidDataError: If the file is not valid configuration
        """
        try:
            raw = config_path.read_bytes()
        except OSError as e:
            raise FileOperationError(f"Failed to read config {config_path}: {e}") from e

        try:
            return msgspec.json.decode(raw, type=cls)
        except (msgspec.DecodeError, msgspec.ValidationError) as e:
            raise InvalidDataError(f"Invalid config in {config_path}: {e}") from e
