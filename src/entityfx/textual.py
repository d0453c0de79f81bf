"""Textual integration for entityfx. Opt-in — requires textual.

Guarding, NoMatches handling and thread marshaling live here, not in the
handlers. Pause state is owned by this module: an app id is in _paused_apps
exactly while a pause() block for it is open.
"""

import logging
import threading
from contextlib import contextmanager

from textual.css.query import NoMatches

from entityfx.batch import suspended

logger = logging.getLogger("entityfx.textual")

# Keyed by id(app) so multiple apps work in tests. Values count nested pauses.
_paused_apps: dict[int, int] = {}


@contextmanager
def pause(app, *collections):
    """Suspend the given collections while the widget tree is being replaced.

    Changes made inside the block reach bound handlers as one coalesced
    notification when the block exits.
    """
    key = id(app)
    with suspended(*collections):
        _paused_apps[key] = _paused_apps.get(key, 0) + 1
        try:
            yield
        finally:
            remaining = _paused_apps[key] - 1
            if remaining:
                _paused_apps[key] = remaining
            else:
                del _paused_apps[key]


def is_safe(app) -> bool:
    """Is the widget tree in a queryable state?"""
    return app.is_running and id(app) not in _paused_apps


def bind(app, collection, handler):
    """Subscribe handler to collection.collection_changed, bridged to Textual.

    Skips delivery while the app is not running, marshals calls from other
    threads through call_from_thread, and swallows NoMatches raised by
    widget queries. Returns a disposer.
    """
    _main = threading.get_ident()

    def _guarded(source, added, removed, changed):
        if not app.is_running:
            logger.debug(
                "Dropped change for collection %s: app not running (%d added, %d removed, %d changed)",
                source.id, len(added), len(removed), len(changed),
            )
            return
        if threading.get_ident() != _main:
            app.call_from_thread(_safe, source, added, removed, changed)
        else:
            _safe(source, added, removed, changed)

    def _safe(source, added, removed, changed):
        try:
            handler(source, added, removed, changed)
        except NoMatches:
            logger.debug("Widget query failed while handling change for collection %s", source.id)

    return collection.collection_changed.subscribe(_guarded)
