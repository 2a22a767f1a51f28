"""Load publication records from a ``publications.json`` file."""

import json
import logging
from pathlib import Path
from typing import Any

import msgspec

from .exceptions import FileOperationError, InvalidDataError
from .models import Publication
from .types import PublicationRecords

logger = logging.getLogger(__name__)


def validate_publication_records(data: Any) -> PublicationRecords:
    """Validate decoded JSON as a list of publication records.

    Raises:
        InvalidDataError: If the data is not an array of well-typed records
    """
    try:
        return msgspec.convert(data, type=PublicationRecords)
    except msgspec.ValidationError as e:
        raise InvalidDataError(f"Invalid publication data: {e}") from e


def load_json_publications(json_path: Path) -> list[Publication]:
    """Load and validate publications from a JSON file.

    Args:
        json_path: Path to ``publications.json``

    Returns:
        Publications in file order

    Raises:
        FileOperationError: If the file cannot be read
        InvalidDataError: If the JSON is malformed or records have the wrong shape
    """
    logger.debug("Loading publications from %s", json_path)

    try:
        with open(json_path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise FileOperationError(f"Publication file not found: {json_path}") from e
    except json.JSONDecodeError as e:
        raise InvalidDataError(f"Invalid JSON in {json_path}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise FileOperationError(f"Failed to read {json_path}: {e}") from e

    records = validate_publication_records(data)
    logger.debug("Loaded %d publication records", len(records))
    return [Publication.from_record(record) for record in records]
