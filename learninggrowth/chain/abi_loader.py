"""ABI file loading."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Optional, Union

from .errors import ConfigurationError

_LOGGER = logging.getLogger(__name__)

Abi = List[dict[str, Any]]


def load_abi(file_path: Union[str, Path], base_dir: Optional[Union[str, Path]] = None) -> Abi:
    """Load a contract ABI from a JSON file.

    Relative paths are resolved against ``base_dir`` (the current working
    directory by default). Both a bare ABI list and a compiler artifact that
    nests the list under an ``abi`` key are accepted.

    Raises:
        ConfigurationError: If the file does not exist or holds no ABI list.
    """
    path = Path(file_path)
    if not path.is_absolute():
        path = Path(base_dir or Path.cwd()) / path

    if not path.exists():
        raise ConfigurationError(f"ABI file not found at path {path}.")

    content = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(content, dict) and "abi" in content:
        content = content["abi"]
    if not isinstance(content, list):
        raise ConfigurationError(f"ABI file {path} does not contain an ABI list.")

    _LOGGER.debug("Loaded ABI with %d entries from %s", len(content), path)
    return content
