# cultivation/services/resource_service.py
import json
import os
import tempfile
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

import requests

from cultivation.core.constants import (
    APP_NAME,
    APP_VERSION,
    CLIENT_VERSIONS,
    HTTP_TIMEOUT_SECONDS,
    RESOURCE_CACHE_FILE_NAME,
)
from cultivation.models.resource_model import CacheEntry
from cultivation.utils.logger_utils import logger


class CacheRefreshFailed(IOError):
    pass


class ResourceCacheManager:
    """
    Keeps a version-keyed cache of launcher resources on disk.
    resources.json holds one entry per client version, so refreshes that
    finish out of order never replace each other.
    Refreshing hits the network; reading the cache never does. A missing
    resource is a normal outcome (None), not an error.
    """

    def __init__(
        self,
        cache_dir: Path,
        versions: Optional[dict[str, str]] = None,
        session: Optional[requests.Session] = None,
    ):
        # ---Service Setup ---
        self.cache_dir = Path(cache_dir)
        self.cache_file = self.cache_dir / RESOURCE_CACHE_FILE_NAME
        self.versions = dict(versions) if versions is not None else dict(CLIENT_VERSIONS)
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": f"{APP_NAME}/{APP_VERSION}"})
        # Refreshes run on pool threads; serialises each read-modify-write of the cache file
        self._lock = threading.Lock()

    def get_versions(self) -> list[str]:
        """Selectable client versions, in manifest order."""
        return list(self.versions)

    def refresh(self, version: str) -> Optional[CacheEntry]:
        """
        Downloads the resources for `version`, caches and returns them.
        Returns None when they cannot be fetched; that version's previous
        entry is dropped so a stale link is not served afterwards.
        """
        try:
            entry = self._fetch(version)
        except CacheRefreshFailed as e:
            logger.warning(f"Resource refresh for version '{version}' failed: {e}")
            self._update_cache(version, None)
            return None

        self._update_cache(version, entry)
        logger.info(f"Cached launcher resources for version '{version}'.")
        return entry

    def read_cached(self, version: Optional[str] = None) -> Optional[CacheEntry]:
        """
        Returns a cached entry without touching the network: the entry for
        `version`, or the most recently fetched one when no version is given.
        """
        with self._lock:
            entries = self._load_entries()

        if version is not None:
            entry = entries.get(version)
            if entry is None:
                logger.debug(f"No cached resources for version '{version}'.")
            return entry

        if not entries:
            return None
        return max(entries.values(), key=lambda e: e.fetched_at or "")

    # --- Private Helpers ---

    def _fetch(self, version: str) -> CacheEntry:
        url = self.versions.get(version)
        if not url:
            raise CacheRefreshFailed(f"Unknown client version '{version}'.")

        try:
            logger.debug(f"Fetching launcher resources from {url}")
            response = self.session.get(url, timeout=HTTP_TIMEOUT_SECONDS)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            raise CacheRefreshFailed(f"Request failed: {e}") from e
        except ValueError as e:
            raise CacheRefreshFailed(f"Response is not valid JSON: {e}") from e

        if not isinstance(payload, dict):
            raise CacheRefreshFailed("Response is not a JSON object.")

        # The resource API nests its body under "data"; a missing body means
        # the version is not served (retcode != 0).
        data = payload.get("data")
        if not isinstance(data, dict):
            raise CacheRefreshFailed(
                f"No resource data for version '{version}' (retcode={payload.get('retcode')})."
            )

        link = data.get("metadata_backup_link") or None
        if link is None:
            logger.info(f"Resources for version '{version}' carry no metadata backup link.")
        return CacheEntry(
            version=version,
            metadata_backup_link=link,
            fetched_at=datetime.now(timezone.utc).isoformat(),
        )

    def _load_entries(self) -> dict[str, CacheEntry]:
        if not self.cache_file.is_file():
            return {}
        try:
            with open(self.cache_file, "r", encoding="utf-8") as f:
                raw = json.load(f)
            if not isinstance(raw, dict):
                raise TypeError("resource cache is not a JSON object")
            return {version: CacheEntry.from_dict(data) for version, data in raw.items()}
        except (OSError, json.JSONDecodeError, KeyError, TypeError, AttributeError) as e:
            logger.warning(f"Ignoring unreadable resource cache '{self.cache_file}': {e}")
            return {}

    def _update_cache(self, version: str, entry: Optional[CacheEntry]):
        """Stores (or with None, drops) the entry for one version."""
        with self._lock:
            entries = self._load_entries()
            if entry is None:
                if entries.pop(version, None) is None:
                    return
            else:
                entries[version] = entry
            self._write_entries(entries)

    def _write_entries(self, entries: dict[str, CacheEntry]):
        data: dict[str, Any] = {version: e.to_dict() for version, e in entries.items()}
        temp_path = None
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(prefix=".resources-", suffix=".tmp", dir=self.cache_dir)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=4)
            os.replace(temp_path, self.cache_file)
        except OSError as e:
            # Callers still get their entry; only the disk copy is lost.
            logger.error(f"Error saving resource cache: {e}")
            if temp_path and os.path.exists(temp_path):
                os.remove(temp_path)
