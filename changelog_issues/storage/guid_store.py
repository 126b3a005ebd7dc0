"""
Last Processed GUID Store
=========================

File-backed marker holding the GUID of the newest changelog entry that
has already been turned into an issue.
"""

from pathlib import Path
from typing import Optional, Union

from ..utils.logging import get_logger_for_component
from ..utils.exceptions import GuidStoreError


class GuidStore:
    """Reads and writes the single last-processed GUID."""

    def __init__(self, path: Union[str, Path]):
        """Initialize store.

        Args:
            path: Marker file location
        """
        self.path = Path(path)
        self.logger = get_logger_for_component("guid_store")

    def read(self) -> Optional[str]:
        """Return the stored GUID, or None when nothing was processed yet.

        An unreadable marker is logged and treated as absent, so the next
        run starts from the whole feed instead of failing.
        """
        if not self.path.exists():
            self.logger.info("No previously processed entries found")
            return None

        try:
            guid = self.path.read_text(encoding="utf-8").strip()
        except (OSError, UnicodeDecodeError) as e:
            self.logger.warning(f"Error reading last processed entry: {e}")
            return None

        if not guid:
            self.logger.info("Marker file is empty, treating as no previous entries")
            return None

        self.logger.info(f"Last processed changelog entry: {guid}")
        return guid

    def write(self, guid: str) -> None:
        """Persist the newest processed GUID.

        Raises:
            GuidStoreError: If the marker cannot be written
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(guid, encoding="utf-8")
        except OSError as e:
            raise GuidStoreError(
                f"Failed to write last processed entry to {self.path}: {e}",
                path=str(self.path),
            ) from e

        self.logger.info(f"Updated last processed entry to: {guid}")
