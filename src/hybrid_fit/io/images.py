"""
Progress photo encoding.

Photos are stored inline in the history entry as a data URL, never as a
reference to an external file.
"""

import base64
import mimetypes
from pathlib import Path


def read_blob(path: str | Path) -> str:
    """
    Encode an image file as a ``data:<mime>;base64,...`` URL.

    Args:
        path: Image file

    Returns:
        Data URL string

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file does not look like an image
    """
    path = Path(path)
    mime, _ = mimetypes.guess_type(path.name)
    if mime is None or not mime.startswith("image/"):
        raise ValueError(f"Not an image file: {path.name}")

    data = path.read_bytes()
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


def blob_size_bytes(blob: str) -> int:
    """Approximate decoded size of a data URL, for display."""
    _, _, payload = blob.partition(",")
    return len(payload) * 3 // 4
