"""
Project manifest (package.json) reader
"""

import json
from pathlib import Path
from typing import Dict, Set, Union

from .log import LOG


class ManifestError(Exception):
    """Raised when package.json cannot be read or parsed"""
    pass


def manifest_read(cwd: Union[str, Path]) -> Dict:
    """
    Read <cwd>/package.json.

    Raises:
        ManifestError: If the file is missing, unreadable, or not an object
    """
    path = Path(cwd) / 'package.json'
    try:
        data = json.loads(path.read_text(encoding='utf-8'))
    except (OSError, ValueError) as e:
        raise ManifestError(f"Cannot read {path}: {e}")
    if not isinstance(data, dict):
        raise ManifestError(f"{path} must contain a JSON object")
    return data


def dependencies_declared(cwd: Union[str, Path]) -> Set[str]:
    """
    Names listed under dependencies or devDependencies.

    Returns:
        Declared package names; empty when the manifest is unusable
    """
    try:
        manifest = manifest_read(cwd)
    except ManifestError as e:
        LOG(f"No usable project manifest: {e}", level=3)
        return set()

    names: Set[str] = set()
    for section in ('dependencies', 'devDependencies'):
        entries = manifest.get(section)
        if isinstance(entries, dict):
            names.update(entries.keys())
    return names
