from __future__ import annotations

import hashlib
from pathlib import Path


class DataAccessError(Exception):
    pass


def resolve_under_data_root(*, data_root: Path, relpath: str) -> Path:
    """
    Resolve a relative label-image path under an explicit, resolved data_root.

    - This module must not assume where captured labels live.
    - This module must not read environment variables.
    - All image access is rooted at the data_root passed in explicitly.
    """

    if relpath.startswith(("/", "\\")) or (":" in relpath and "\\" in relpath):
        # Absolute path / Windows drive patterns are not permitted as "relpath".
        raise DataAccessError(f"Expected a relative path under data_root, got: {relpath!r}")

    root = data_root.expanduser().resolve()
    candidate = (root / relpath).resolve()

    if not candidate.is_relative_to(root):
        raise DataAccessError(f"Path traversal or external reference detected: relpath={relpath!r}")

    return candidate


def sha256_file(path: Path) -> str:
    """
    Compute SHA-256 of a captured label image for audit metadata.
    """

    h = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(1024 * 1024), b""):
            h.update(chunk)
    return h.hexdigest()
