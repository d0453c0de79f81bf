"""Entity — an identity-keyed bag of tracked properties.

Every write that actually changes a value emits definition_changed with
(entity, property_name, new_value, old_value). Collections subscribe to it to
learn about modifications of their members.
"""

from __future__ import annotations

import uuid
from collections.abc import Hashable
from datetime import datetime
from typing import Any, Protocol, runtime_checkable

from entityfx.event import Event, Listener
from entityfx.timeinterval import TimeInterval


def create_guid() -> str:
    return str(uuid.uuid4())


class _ChangeSource(Protocol):
    def subscribe(self, callback: Listener) -> Any: ...

    def unsubscribe(self, callback: Listener) -> bool: ...


@runtime_checkable
class EntityLike(Protocol):
    """What EntityCollection needs from its members."""

    @property
    def id(self) -> Hashable: ...

    @property
    def definition_changed(self) -> _ChangeSource: ...


class _Tracked:
    """Descriptor routing attribute access through Entity.get/Entity.set."""

    def __set_name__(self, owner, name: str) -> None:
        self._name = name

    def __get__(self, obj, objtype=None):
        if obj is None:
            return self
        return obj.get(self._name)

    def __set__(self, obj, value) -> None:
        obj.set(self._name, value)


class Entity:
    """A uniquely identified object whose property writes are observable."""

    __slots__ = ("_id", "_values", "_definition_changed")

    name = _Tracked()
    availability = _Tracked()

    def __init__(
        self,
        id: Hashable | None = None,
        name: str | None = None,
        availability: TimeInterval | None = None,
        **properties: Any,
    ) -> None:
        self._id = create_guid() if id is None else id
        self._values: dict[str, Any] = {"name": name, "availability": availability}
        self._values.update(properties)
        self._definition_changed = Event()

    @property
    def id(self) -> Hashable:
        return self._id

    @property
    def definition_changed(self) -> Event:
        return self._definition_changed

    @property
    def property_names(self) -> tuple[str, ...]:
        return tuple(self._values)

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Write a property and emit definition_changed if the value differs."""
        old = self._values.get(key)
        if key in self._values and (old is value or old == value):
            return
        self._values[key] = value
        self._definition_changed.emit(self, key, value, old)

    def is_available(self, time: datetime) -> bool:
        """True if time lies within availability. Unset availability means always."""
        availability = self._values.get("availability")
        return availability is None or availability.contains(time)

    def __repr__(self) -> str:
        return f"Entity({self._id!r})"
