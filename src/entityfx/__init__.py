"""entityfx: observable entity collections with coalesced change events."""

from importlib.metadata import version as _version

__version__ = _version("entityfx")

from entityfx.event import Event
from entityfx.timeinterval import MAXIMUM_VALUE, MINIMUM_VALUE, TimeInterval
from entityfx.entity import Entity, EntityLike, create_guid
from entityfx.collection import EntityCollection
from entityfx.batch import batch, suspended
from entityfx.exceptions import DeveloperError, DuplicateIdError, EntityFxError
# textual NOT auto-imported — opt-in only

__all__ = [
    "Event",
    "TimeInterval",
    "MINIMUM_VALUE",
    "MAXIMUM_VALUE",
    "Entity",
    "EntityLike",
    "create_guid",
    "EntityCollection",
    "batch",
    "suspended",
    "EntityFxError",
    "DeveloperError",
    "DuplicateIdError",
]
