"""Descriptor and payload I/O helpers (internal)."""

import json
from pathlib import Path
from typing import Any, Union

from pydantic import ValidationError

from driftsafe.kernel.descriptor import ModelDescriptor


class DescriptorError(ValueError):
    """Raised when a descriptor file cannot be read or is invalid."""
    pass


def load_descriptor_from_path(path: Union[str, Path]) -> ModelDescriptor:
    """Load a model descriptor from a JSON file path."""
    descriptor_path = Path(path)
    try:
        data = descriptor_path.read_bytes()
    except OSError as e:
        raise DescriptorError(f"Cannot read descriptor {descriptor_path}: {e}") from e
    try:
        return ModelDescriptor.from_json_bytes(data)
    except ValidationError as e:
        raise DescriptorError(f"Invalid descriptor {descriptor_path}: {e}") from e


def load_payload_from_path(path: Union[str, Path]) -> Any:
    """Parse a JSON payload file into plain Python data."""
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)
