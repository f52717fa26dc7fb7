"""Output folder: data.json, index.html and one page per bin."""
import logging
import shutil
from pathlib import Path

import aiofiles

from jsbin_export.errors import FilesystemError
from jsbin_export.parse.models import ExportSnapshot, ListItem

logger = logging.getLogger(__name__)

DATA_FILE = "data.json"
INDEX_FILE = "index.html"


class ExportWriter:
    """Writes an export into a folder that is recreated on every run."""

    def __init__(self, folder: Path):
        self.folder = Path(folder)

    def reset(self) -> None:
        """Delete the folder and everything in it, then create it empty."""
        try:
            if self.folder.exists():
                shutil.rmtree(self.folder)
                logger.debug(f"Removed {self.folder}")
            self.folder.mkdir(parents=True)
        except OSError as e:
            raise FilesystemError(f"Could not recreate {self.folder}: {e}") from e

    def write_snapshot(self, snapshot: ExportSnapshot, index_html: str) -> None:
        """Save data.json (pretty-printed) and the rendered index."""
        data_path = self.folder / DATA_FILE
        index_path = self.folder / INDEX_FILE
        try:
            data_path.write_bytes(snapshot.to_json())
            index_path.write_text(index_html, encoding="utf-8")
        except OSError as e:
            raise FilesystemError(f"Could not write snapshot to {self.folder}: {e}") from e
        logger.info(f"Saved {DATA_FILE} and {INDEX_FILE} to {self.folder}")

    async def write_item(self, item: ListItem, html: str) -> Path:
        """Save one bin page as <code>-<revision>.html."""
        path = self.folder / item.filename
        if path.parent != self.folder:
            raise FilesystemError(f"Refusing to write outside {self.folder}: {item.filename}")
        try:
            async with aiofiles.open(path, "w", encoding="utf-8") as f:
                await f.write(html)
        except OSError as e:
            raise FilesystemError(f"Could not write {path}: {e}") from e
        return path
