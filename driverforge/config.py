"""Configuration for the driver finder."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

CACHE_FILENAME = "driver_cache.txt"
ROOT_MARKER_FILENAME = "driver_cache.root"
LOCAL_INF_DIRNAME = "inf"


def _env_path(name: str, default: str) -> str:
    return os.environ.get(name, default)


@dataclass
class FinderConfig:
    # Remote driver-package share
    driver_root: str = field(
        default_factory=lambda: _env_path("DRIVERFORGE_DRIVER_ROOT", r"\\fileserver\drivers")
    )

    # Local cache
    cache_dir: str = field(
        default_factory=lambda: _env_path(
            "DRIVERFORGE_CACHE_DIR", str(Path.home() / ".driverforge" / "cache")
        )
    )

    # Rebuild even if a cache exists
    refresh: bool = False

    # Copy description files locally before indexing
    sync: bool = True

    def resolve_cache_dir(self) -> Path:
        """Return cache dir, creating if needed. Falls back to home."""
        p = Path(self.cache_dir)
        try:
            p.mkdir(parents=True, exist_ok=True)
            return p
        except PermissionError:
            fallback = Path.home() / ".driverforge" / "cache"
            fallback.mkdir(parents=True, exist_ok=True)
            return fallback

    @property
    def cache_path(self) -> Path:
        return self.resolve_cache_dir() / CACHE_FILENAME

    @property
    def index_root(self) -> Path:
        """Directory the index is built from."""
        if self.sync:
            return self.resolve_cache_dir() / LOCAL_INF_DIRNAME
        return Path(self.driver_root)

    @property
    def root_marker_path(self) -> Path:
        """Records which directory the cache was built from."""
        return self.resolve_cache_dir() / ROOT_MARKER_FILENAME

    def cached_index_root(self) -> Optional[str]:
        marker = self.root_marker_path
        if not marker.exists():
            return None
        return marker.read_text(encoding="utf-8").strip()

    def record_index_root(self):
        self.root_marker_path.write_text(str(self.index_root), encoding="utf-8")

    def root_changed(self) -> bool:
        return self.cached_index_root() != str(self.index_root)

    def needs_rebuild(self) -> bool:
        return self.refresh or not self.cache_path.exists() or self.root_changed()
