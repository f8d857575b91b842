"""Resolution of batch XML files inside the upload directory."""

import os
from pathlib import Path
from typing import Optional

DEFAULT_UPLOAD_DIR = Path("uploads") / "financeiro"


def resolve_upload_root(upload_dir: Optional[str] = None) -> Path:
    """Return the directory holding uploaded batch XML files.

    Args:
        upload_dir: Explicit directory. If None, checks TISSBATCH_UPLOAD_DIR
            environment variable, then defaults to ./uploads/financeiro

    Returns:
        Absolute path of the upload root (it is not required to exist)
    """
    if upload_dir is None:
        upload_dir = os.environ.get("TISSBATCH_UPLOAD_DIR")

    root = Path(upload_dir) if upload_dir else DEFAULT_UPLOAD_DIR
    return root.expanduser().resolve()


def resolve_batch_file(upload_root: Path, xml_filename: str) -> Path:
    """Join a stored filename onto the upload root.

    Args:
        upload_root: Upload directory
        xml_filename: Filename relative to the upload root, as stored on the batch

    Returns:
        Resolved path of the XML file

    Raises:
        ValueError: If the filename is empty or resolves outside the upload root
    """
    if not xml_filename or not xml_filename.strip():
        raise ValueError("Empty XML filename")

    root = upload_root.resolve()
    path = (root / xml_filename.strip()).resolve()
    if not path.is_relative_to(root):
        raise ValueError(f"Path '{xml_filename}' escapes upload root {root}")
    return path
