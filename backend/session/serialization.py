"""
Playlist state <-> persisted attributes.

Responsibilities:
- Convert PlaylistState into the two named records stored per user
  (playbackSetting, playbackInfo).
- Validate and convert stored attributes back into PlaylistState.

Non-responsibilities:
- No store access
- No logging
- No defaults for missing users (see session.lifecycle)
"""

from __future__ import annotations

from typing import Any, Mapping

from constants import ATTR_PLAYBACK_INFO, ATTR_PLAYBACK_SETTING
from playback.errors import CatalogSizeMismatch, PersistedStateError
from playback.order import is_permutation
from playback.state_dataclass import PlaybackInfo, PlaybackSetting, PlaylistState


def to_attributes(state: PlaylistState) -> dict[str, Any]:
    """
    Serialize state to the stored document layout:

    {
      "playbackSetting": {"loop": ..., "shuffle": ...},
      "playbackInfo": {"order": [...], "index": ..., "offsetMillis": ...,
                       "token": ..., "enqueuedNext": ..., "inSession": ...,
                       "hadPriorSession": ..., "indexChanged": ...}
    }
    """
    setting = state.setting
    info = state.info
    return {
        ATTR_PLAYBACK_SETTING: {
            "loop": setting.loop,
            "shuffle": setting.shuffle,
        },
        ATTR_PLAYBACK_INFO: {
            "order": list(info.order),
            "index": info.index,
            "offsetMillis": info.offset_ms,
            "token": info.token,
            "enqueuedNext": info.enqueued_next,
            "inSession": info.in_session,
            "hadPriorSession": info.had_prior_session,
            "indexChanged": info.index_changed,
        },
    }


def _record(attributes: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    record = attributes.get(name)
    if not isinstance(record, Mapping):
        raise PersistedStateError(f"Missing or invalid record {name!r}")
    return record


def _bool(record: Mapping[str, Any], key: str, default: bool) -> bool:
    value = record.get(key, default)
    if not isinstance(value, bool):
        raise PersistedStateError(f"{key!r} must be a boolean, got {value!r}")
    return value


def _int(record: Mapping[str, Any], key: str, default: int) -> int:
    value = record.get(key, default)
    # bool is an int subclass; never accept it as a number here
    if isinstance(value, bool) or not isinstance(value, int):
        raise PersistedStateError(f"{key!r} must be an integer, got {value!r}")
    return value


def setting_from_attributes(attributes: Mapping[str, Any]) -> PlaybackSetting:
    record = _record(attributes, ATTR_PLAYBACK_SETTING)
    return PlaybackSetting(
        loop=_bool(record, "loop", False),
        shuffle=_bool(record, "shuffle", False),
    )


def from_attributes(
    attributes: Mapping[str, Any],
    *,
    catalog_size: int,
) -> PlaylistState:
    """
    Rebuild state from stored attributes.

    Raises:
        CatalogSizeMismatch: the stored order belongs to another catalog size.
        PersistedStateError: anything else is structurally wrong.
    """
    setting = setting_from_attributes(attributes)
    record = _record(attributes, ATTR_PLAYBACK_INFO)

    raw_order = record.get("order")
    if not isinstance(raw_order, list) or not all(
        isinstance(i, int) and not isinstance(i, bool) for i in raw_order
    ):
        raise PersistedStateError(f"'order' must be a list of integers, got {raw_order!r}")

    if len(raw_order) != catalog_size:
        raise CatalogSizeMismatch(stored=len(raw_order), expected=catalog_size)

    if not is_permutation(raw_order, catalog_size):
        raise PersistedStateError("'order' is not a permutation of the catalog")

    index = _int(record, "index", 0)
    if not 0 <= index < catalog_size:
        raise PersistedStateError(f"'index' {index} out of range")

    offset_ms = _int(record, "offsetMillis", 0)
    if offset_ms < 0:
        raise PersistedStateError(f"'offsetMillis' {offset_ms} is negative")

    token = record.get("token", "")
    if not isinstance(token, str):
        raise PersistedStateError(f"'token' must be a string, got {token!r}")

    info = PlaybackInfo(
        order=tuple(raw_order),
        index=index,
        offset_ms=offset_ms,
        token=token,
        enqueued_next=_bool(record, "enqueuedNext", False),
        in_session=_bool(record, "inSession", False),
        had_prior_session=_bool(record, "hadPriorSession", False),
        index_changed=_bool(record, "indexChanged", True),
    )
    return PlaylistState(setting=setting, info=info)
