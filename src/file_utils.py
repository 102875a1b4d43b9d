"""
File utility functions for the article board.
Common file operations to avoid code duplication.
"""
import json
import os
import tempfile
from datetime import datetime, timezone
from typing import Any, Dict


def load_json_file(filepath: str, default: Dict[str, Any]) -> Dict[str, Any]:
    """
    Load a JSON file with a default fallback.

    Args:
        filepath: Path to the JSON file
        default: Default value if file doesn't exist

    Returns:
        Loaded JSON data or default value
    """
    if os.path.exists(filepath):
        with open(filepath, 'r', encoding='utf-8') as f:
            return json.load(f)
    return default


def save_json_file(filepath: str, data: Dict[str, Any], ensure_dir: bool = True) -> None:
    """
    Save data to a JSON file.

    The data is written to a temporary file next to the target and moved into
    place, so readers never observe a half-written file.

    Args:
        filepath: Path to save the JSON file
        data: Data to save
        ensure_dir: Whether to create parent directory if it doesn't exist
    """
    directory = os.path.dirname(filepath) or "."
    if ensure_dir:
        os.makedirs(directory, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".tmp-", suffix=".json")
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2)
        os.replace(tmp_path, filepath)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise


def get_utc_timestamp() -> str:
    """
    Get current UTC timestamp in ISO format.

    Returns:
        ISO formatted timestamp string without +00:00 suffix
    """
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
