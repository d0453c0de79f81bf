"""Batched mutations across one or more collections.

Wrapping mutations in @batch(...) or `with suspended(...)` holds back
collection_changed on every listed collection until the outermost scope
exits, so subscribers see one net notification per collection instead of
one per add/remove.
"""

from __future__ import annotations

import functools
from contextlib import contextmanager
from typing import TYPE_CHECKING, Callable, ParamSpec, TypeVar

if TYPE_CHECKING:
    from entityfx.collection import EntityCollection

P = ParamSpec("P")
R = TypeVar("R")


@contextmanager
def suspended(*collections: EntityCollection):
    """Context manager suspending events on every collection.

    Collections are resumed in reverse order on exit.

    Usage:
        with suspended(vehicles, stations):
            vehicles.add(car)
            stations.remove_all()
            # each collection fires once, here
    """
    for collection in collections:
        collection.suspend_events()
    try:
        yield
    finally:
        for collection in reversed(collections):
            collection.resume_events()


def batch(*collections: EntityCollection) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Decorator: run fn with events suspended on the given collections.

    Usage:
        tracks = EntityCollection()

        @batch(tracks)
        def load(records):
            for record in records:
                tracks.add(record)
            # subscribers get a single notification after load() returns
    """

    def decorator(fn: Callable[P, R]) -> Callable[P, R]:
        @functools.wraps(fn)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            with suspended(*collections):
                return fn(*args, **kwargs)

        return wrapper

    return decorator
