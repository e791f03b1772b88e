"""Listening statistics for narrator."""

from pathlib import Path


def get_data_dir() -> Path:
    """Get or create the narrator data directory.

    Creates ~/.local/share/narrator/ if it doesn't exist.

    Returns:
        Path to the data directory
    """
    data_dir = Path.home() / ".local" / "share" / "narrator"
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir
