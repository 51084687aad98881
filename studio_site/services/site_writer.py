"""File writes into the site's publish directory."""
from pathlib import Path
from typing import Mapping, Optional

from ..config import settings
from ..errors import BuildError, PlaceholderNotFoundError
from ..utils.logger import logger


class SiteWriter:
    """Splices generated markup into pages under the publish directory."""

    def __init__(self, publish_dir: Optional[Path] = None):
        """Initialize the writer.

        Args:
            publish_dir: Site root. Defaults to settings.publish_path
        """
        self.publish_dir = Path(publish_dir) if publish_dir else settings.publish_path

    def page_path(self, name: str) -> Path:
        return self.publish_dir / name

    def read_page(self, name: str) -> str:
        """Read a page as UTF-8.

        Raises:
            BuildError: The page is missing or unreadable
        """
        path = self.page_path(name)
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise BuildError(
                f"[BUILD] Could not read {path}. Make sure {name} exists in "
                f"the publish directory."
            ) from e

    def splice(self, name: str, replacements: Mapping[str, str]) -> Path:
        """Replace placeholder tokens in a page and write it back in place.

        All tokens are checked before anything is replaced, so a page
        missing any token is left untouched. Only the first occurrence of
        each token is replaced.

        Args:
            name: Page file name relative to the publish directory
            replacements: Placeholder token -> generated markup

        Returns:
            Path of the updated page

        Raises:
            BuildError: The page cannot be read or written
            PlaceholderNotFoundError: A token is absent
        """
        path = self.page_path(name)
        content = self.read_page(name)

        for token in replacements:
            if token not in content:
                raise PlaceholderNotFoundError(token, path)

        for token, markup in replacements.items():
            content = content.replace(token, markup, 1)

        self._write(path, content)
        logger.info(f"[BUILD] Updated {path}")
        return path

    def write_page(self, relative_path: str, html: str) -> Path:
        """Write a generated page, creating parent directories.

        Raises:
            BuildError: The page cannot be written
        """
        path = self.publish_dir / relative_path
        self._write(path, html)
        return path

    def _write(self, path: Path, content: str) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise BuildError(f"[BUILD] Could not write {path}: {e}") from e
