"""
Device-local cache of the last known position.

Stored as a small JSON file so it survives restarts of the CLI; losing the
file only means the next catalog query runs without a location.
"""

from __future__ import annotations

import json
from pathlib import Path

from latebites_shared.config.logging import location_logger as logger
from latebites_shared.config.settings import settings
from latebites_shared.utils.geo import Coordinates


class LocationCache:
    """
    Persist, load and clear the last known coordinates.

    Usage:
        cache = LocationCache()
        cache.save(Coordinates(11.0168, 76.9558))
        origin = cache.load()  # None if nothing usable is stored
    """

    def __init__(self, path: str | Path | None = None):
        self._path = Path(path or settings.location_cache_path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def save(self, coords: Coordinates) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(coords.to_dict()), encoding="utf-8")

    def load(self) -> Coordinates | None:
        """Return the cached coordinates, or None when missing or unreadable."""
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
            return Coordinates(float(raw["latitude"]), float(raw["longitude"]))
        except FileNotFoundError:
            return None
        except (OSError, ValueError, TypeError, KeyError) as e:
            logger.warning("Ignoring unreadable location cache", path=str(self._path), error=str(e))
            return None

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)
