"""
Immutable track catalog.

Rules:
- The catalog is injected into every component; there is no global list.
- Catalog index (0-based position) is what play orders and tokens refer to.
- Track id (1-based, stable) is what users ask for by number.
- Name matching is isolated in resolve_by_name so it can be swapped.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

from constants import DEFAULT_UNAVAILABLE_TRACK_IDS
from playback.errors import CatalogError, TrackNotFound, TrackUnavailable


_NON_WORD = re.compile(r"\W")


@dataclass(frozen=True)
class Track:
    """One catalog entry."""
    id: int
    name: str
    url: str


@dataclass(frozen=True)
class Catalog:
    """
    Ordered, immutable list of tracks plus the static exclusion set.

    `unavailable_ids` holds track ids (not catalog indices).
    """

    tracks: tuple[Track, ...]
    unavailable_ids: frozenset[int] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not self.tracks:
            raise CatalogError("Catalog must contain at least one track")

        seen: set[int] = set()
        for track in self.tracks:
            if track.id in seen:
                raise CatalogError(f"Duplicate track id {track.id}")
            seen.add(track.id)

    def __len__(self) -> int:
        return len(self.tracks)

    def track_at(self, catalog_index: int) -> Track:
        return self.tracks[catalog_index]

    def is_unavailable(self, catalog_index: int) -> bool:
        return self.tracks[catalog_index].id in self.unavailable_ids

    def resolve_by_number(self, number: int) -> int | None:
        """Return the catalog index of the track with id `number`."""
        for catalog_index, track in enumerate(self.tracks):
            if track.id == number:
                return catalog_index
        return None

    def resolve(
        self,
        slot_value: str | None,
        *,
        by_name: Callable[[Catalog, str], int | None] | None = None,
    ) -> int:
        """
        Resolve a spoken name-or-number to a catalog index.

        Plain digit strings are looked up by track id, anything else
        (including "1_0" or "203.0") by name.

        Raises:
            TrackNotFound: empty value or no match.
            TrackUnavailable: match is in the exclusion set.
        """
        if slot_value is None or not slot_value.strip():
            raise TrackNotFound(slot_value)

        name_resolver = by_name or resolve_by_name

        text = slot_value.strip()
        if text.isascii() and text.isdigit():
            catalog_index = self.resolve_by_number(int(text))
        else:
            catalog_index = name_resolver(self, slot_value)

        if catalog_index is None:
            raise TrackNotFound(slot_value)

        track = self.tracks[catalog_index]
        if track.id in self.unavailable_ids:
            raise TrackUnavailable(track.id)

        return catalog_index


# =============================================================================
# Name matching
# =============================================================================

def normalize_name(text: str) -> str:
    """
    Reduce a name to a sorted bag of lowercase word characters.

    Deliberately permissive: punctuation, case, spacing and letter order
    are all ignored, so "Amazing Grace" == "amazing, GRACE!".
    """
    return "".join(sorted(_NON_WORD.sub("", text).lower()))


def resolve_by_name(catalog: Catalog, name: str) -> int | None:
    """Return the catalog index of the first track whose name matches."""
    wanted = normalize_name(name)
    for catalog_index, track in enumerate(catalog.tracks):
        if normalize_name(track.name) == wanted:
            return catalog_index
    return None


# =============================================================================
# Loading
# =============================================================================

def catalog_from_dict(data: dict[str, Any]) -> Catalog:
    """
    Build a catalog from its JSON document form:

        {
          "tracks": [{"id": 1, "name": "...", "url": "https://..."}, ...],
          "unavailable": [41, 46]
        }

    `unavailable` is optional; DEFAULT_UNAVAILABLE_TRACK_IDS applies when
    it is absent.
    """
    raw_tracks = data.get("tracks")
    if not isinstance(raw_tracks, list):
        raise CatalogError("Catalog document needs a 'tracks' list")

    tracks: list[Track] = []
    for position, raw in enumerate(raw_tracks):
        try:
            tracks.append(
                Track(
                    id=int(raw["id"]),
                    name=str(raw["name"]),
                    url=str(raw["url"]),
                )
            )
        except (KeyError, TypeError, ValueError) as e:
            raise CatalogError(f"Malformed track at position {position}: {e}") from e

    raw_unavailable = data.get("unavailable")
    if raw_unavailable is None:
        unavailable = DEFAULT_UNAVAILABLE_TRACK_IDS
    else:
        unavailable = frozenset(int(track_id) for track_id in raw_unavailable)

    return Catalog(tracks=tuple(tracks), unavailable_ids=unavailable)


def load_catalog(path: str | Path) -> Catalog:
    """Load a catalog JSON file."""
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise CatalogError(f"Cannot read catalog {path}: {e}") from e

    if not isinstance(data, dict):
        raise CatalogError(f"Catalog {path} must contain a JSON object")

    return catalog_from_dict(data)
