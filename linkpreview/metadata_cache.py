"""
File-based cache of extracted preview metadata.

One JSON file per URL, named by the MD5 hex digest of the exact URL string.
Entries are written once and read back on every later resolution of the
same URL; nothing here expires, refreshes or evicts them.

The cache directory is never created by this module. If it is missing,
store() logs a warning and skips persistence so resolution still succeeds.
"""

import json
import hashlib
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from .config import LinkPreviewConfig
from .schemas import PreviewRecord
from .exceptions import CacheError
from .logger import get_module_logger

logger = get_module_logger("metadata_cache")


def _current_umask() -> int:
    # os.umask() only reads the mask by setting it, so put it straight back
    mask = os.umask(0)
    os.umask(mask)
    return mask


class MetadataCache:
    """
    File-based cache for PreviewRecords.

    Files are named by hash of the URL, so two spellings of the same page
    (trailing slash, reordered query) get separate entries.
    """

    def __init__(self, cache_dir: Union[str, Path]):
        self.cache_dir = Path(cache_dir)

    @staticmethod
    def cache_key(url: str) -> str:
        """MD5 hex digest of the URL, stable across runs."""
        return hashlib.md5(url.encode("utf-8")).hexdigest()

    def path_for(self, url: str) -> Path:
        return self.cache_dir / f"{self.cache_key(url)}.json"

    def exists(self, url: str) -> bool:
        """Check if a record is cached for this URL."""
        return self.path_for(url).is_file()

    def lookup(self, url: str) -> Optional[PreviewRecord]:
        """
        Retrieve the cached record for a URL.

        Args:
            url: URL exactly as passed to the resolver

        Returns:
            PreviewRecord if cached, None on a miss. An unreadable entry
            counts as a miss and is overwritten by the next store().
        """
        cache_file = self.path_for(url)

        if not cache_file.is_file():
            logger.debug(f"Cache miss for {url}")
            return None

        try:
            record = self._read(cache_file)
        except CacheError as e:
            logger.warning(f"Ignoring unreadable cache entry {e.path}: {e.message}")
            return None

        logger.info(f"Cache hit for {url} -> {cache_file.name}")
        return record

    def store(self, url: str, record: PreviewRecord) -> bool:
        """
        Persist a record for a URL.

        Args:
            url: URL exactly as passed to the resolver
            record: Record to write

        Returns:
            True if written, False if skipped because the cache directory
            does not exist
        """
        if not self.cache_dir.is_dir():
            # Logged on every call, once per preview rendered
            logger.warning(f"'{self.cache_dir}' directory does not exist. Create it for caching.")
            return False

        cache_file = self.path_for(url)
        payload = json.dumps(record.model_dump(), indent=2, ensure_ascii=False)

        # Write beside the target then rename, so readers never see a half-written file
        fd, tmp_path = tempfile.mkstemp(dir=self.cache_dir, prefix=".", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            # mkstemp creates 0600; give entries the mode a plain open() would
            os.chmod(tmp_path, 0o666 & ~_current_umask())
            os.replace(tmp_path, cache_file)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

        logger.info(f"Cached metadata for {url} -> {cache_file}")
        return True

    def _read(self, cache_file: Path) -> PreviewRecord:
        try:
            data = json.loads(cache_file.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise CacheError(str(e), path=str(cache_file)) from e

        if not isinstance(data, dict):
            raise CacheError(f"expected a JSON object, got {type(data).__name__}", path=str(cache_file))

        try:
            return PreviewRecord(**data)
        except ValidationError as e:
            raise CacheError(str(e), path=str(cache_file)) from e


# Process-wide default, built from LINKPREVIEW_* settings on first use.
# Resolvers accept an explicit cache instead whenever one is passed in.
_default_cache: Optional[MetadataCache] = None


def get_default_cache() -> MetadataCache:
    """Get or create the default cache instance."""
    global _default_cache
    if _default_cache is None:
        _default_cache = MetadataCache(LinkPreviewConfig.from_env().cache_dir)
    return _default_cache
