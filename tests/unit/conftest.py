# pylint: disable=missing-module-docstring,missing-function-docstring

from typing import Callable, Iterable

import pytest

from playback.catalog import Catalog, Track


def build_catalog(n: int = 10, unavailable: Iterable[int] = ()) -> Catalog:
    """Tracks with ids 1..n, named "Track <id>"."""
    return Catalog(
        tracks=tuple(
            Track(id=i, name=f"Track {i}", url=f"https://media.test/{i:03d}.mp3")
            for i in range(1, n + 1)
        ),
        unavailable_ids=frozenset(unavailable),
    )


@pytest.fixture
def catalog() -> Catalog:
    return build_catalog(10)


@pytest.fixture
def make_catalog() -> Callable[..., Catalog]:
    return build_catalog
