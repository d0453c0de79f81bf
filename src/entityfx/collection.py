"""EntityCollection — an observable, id-keyed collection with batched change events.

Every mutation (add, remove, remove_all, or a member's definition_changed)
is recorded in three ledgers: added, removed and changed. After each
mutation the collection tries to flush: if events are not suspended and any
ledger is non-empty, collection_changed fires once with the contents of all
three ledgers, which then start over empty.

suspend_events()/resume_events() are reference counted. While suspended,
mutations coalesce into net changes: add-then-remove of the same id vanishes,
add-then-modify reports only the add, remove drops an earlier change.

Reentrancy: the ledgers are swapped for fresh ones before collection_changed
fires. Mutations made by a subscriber go into the fresh ledgers and are
delivered by a follow-up notification once the current one has returned,
never nested inside it. If a subscriber raises, the exception propagates
from the mutating call; changes the subscriber made before raising stay
pending and go out with the next flush (the next mutation or resume).
"""

from __future__ import annotations

from collections.abc import Hashable, Iterator, Mapping
from contextlib import contextmanager

from entityfx.entity import Entity, EntityLike, create_guid
from entityfx.event import Event
from entityfx.exceptions import DeveloperError, DuplicateIdError
from entityfx.timeinterval import MAXIMUM_VALUE, MINIMUM_VALUE, TimeInterval


class EntityCollection:
    """An observable collection of entities, each with a unique id."""

    def __init__(self) -> None:
        self._entities: dict[Hashable, EntityLike] = {}
        self._added: dict[Hashable, EntityLike] = {}
        self._removed: dict[Hashable, EntityLike] = {}
        self._changed: dict[Hashable, EntityLike] = {}
        # id -> member that a batch-local replacement displaced
        self._replaced: dict[Hashable, EntityLike] = {}
        self._suspend_count = 0
        self._flushing = False
        self._collection_changed = Event()
        self._id = create_guid()

    # --- Read accessors ---

    @property
    def id(self) -> str:
        """Globally unique identifier of this collection."""
        return self._id

    @property
    def collection_changed(self) -> Event:
        """Fires with (collection, added, removed, changed) lists."""
        return self._collection_changed

    @property
    def entities(self) -> tuple[EntityLike, ...]:
        """Snapshot of the members in insertion order."""
        return tuple(self._entities.values())

    @property
    def suspend_count(self) -> int:
        return self._suspend_count

    def __len__(self) -> int:
        return len(self._entities)

    def __iter__(self) -> Iterator[EntityLike]:
        return iter(tuple(self._entities.values()))

    def __contains__(self, item: object) -> bool:
        if isinstance(item, EntityLike):
            return self._entities.get(item.id) is item
        try:
            return item in self._entities
        except TypeError:
            return False

    # --- Batching ---

    def suspend_events(self) -> None:
        """Hold back collection_changed until the matching resume_events().

        May be nested; each call needs its own resume_events().
        """
        self._suspend_count += 1

    def resume_events(self) -> None:
        """Undo one suspend_events(). Fires the pending batch when the count reaches zero.

        Raises DeveloperError if events are not suspended.
        """
        if self._suspend_count == 0:
            raise DeveloperError("resume_events can not be called before suspend_events.")
        self._suspend_count -= 1
        self._fire_changed()

    @contextmanager
    def suspended(self):
        """Context manager for batching mutations.

        Usage:
            with collection.suspended():
                collection.add(a)
                collection.remove(b)
                # one collection_changed fires here
        """
        self.suspend_events()
        try:
            yield self
        finally:
            self.resume_events()

    def _fire_changed(self) -> None:
        if self._suspend_count != 0 or self._flushing:
            return
        self._flushing = True
        try:
            while self._added or self._removed or self._changed:
                # Snapshot and reset; subscribers may mutate during emit.
                added = list(self._added.values())
                removed = list(self._removed.values())
                changed = list(self._changed.values())
                self._added = {}
                self._removed = {}
                self._changed = {}
                self._replaced = {}
                self._collection_changed.emit(self, added, removed, changed)
                if self._suspend_count != 0:
                    break
        finally:
            self._flushing = False

    # --- Membership ---

    def add(self, entity: EntityLike | Mapping) -> EntityLike:
        """Add an entity and return it.

        A mapping is turned into an Entity first, e.g. add({"id": "a"}).
        Raises DuplicateIdError if the id is already present.
        """
        if entity is None:
            raise DeveloperError("entity is required.")
        if isinstance(entity, Mapping):
            entity = Entity(**entity)

        entity_id = entity.id
        definition_changed = entity.definition_changed
        if entity_id in self._entities:
            raise DuplicateIdError(entity_id)

        self._entities[entity_id] = entity
        # Removed then re-added within one batch: the same object nets out,
        # a replacement object is reported as added.
        previous = self._removed.pop(entity_id, None)
        if previous is not entity:
            self._added[entity_id] = entity
            if previous is not None:
                self._replaced[entity_id] = previous
        definition_changed.subscribe(self._on_entity_definition_changed)

        self._fire_changed()
        return entity

    def remove(self, entity: EntityLike | None) -> bool:
        """Remove an entity. Returns False if it was not in the collection."""
        if entity is None:
            return False
        return self.remove_by_id(entity.id)

    def remove_by_id(self, entity_id: Hashable | None) -> bool:
        """Remove the entity with entity_id. Returns False if there was none."""
        if entity_id is None:
            return False
        entity = self._entities.pop(entity_id, None)
        if entity is None:
            return False

        if self._added.pop(entity_id, None) is None:
            self._removed[entity_id] = entity
            self._changed.pop(entity_id, None)
        elif entity_id in self._replaced:
            self._removed[entity_id] = self._replaced.pop(entity_id)
        entity.definition_changed.unsubscribe(self._on_entity_definition_changed)

        self._fire_changed()
        return True

    def remove_all(self) -> None:
        """Remove every entity.

        Only entities that were members before the current batch show up in
        the removed list; ones added within the batch are dropped silently,
        except that a batch-local replacement reports the member it displaced.
        """
        for entity_id, entity in self._entities.items():
            if entity_id not in self._added:
                self._removed[entity_id] = entity
            elif entity_id in self._replaced:
                self._removed[entity_id] = self._replaced[entity_id]
            entity.definition_changed.unsubscribe(self._on_entity_definition_changed)

        self._entities.clear()
        self._added.clear()
        self._changed.clear()
        self._replaced.clear()
        self._fire_changed()

    def get_by_id(self, entity_id: Hashable) -> EntityLike | None:
        if entity_id is None:
            raise DeveloperError("id is required.")
        return self._entities.get(entity_id)

    def get_or_create_entity(self, entity_id: Hashable) -> EntityLike:
        """Return the entity with entity_id, adding a new bare Entity if absent."""
        if entity_id is None:
            raise DeveloperError("id is required.")
        entity = self._entities.get(entity_id)
        if entity is None:
            entity = self.add(Entity(id=entity_id))
        return entity

    def _on_entity_definition_changed(self, entity: EntityLike, *args) -> None:
        entity_id = entity.id
        if entity_id not in self._added:
            self._changed[entity_id] = entity
        self._fire_changed()

    # --- Aggregation ---

    def compute_availability(self) -> TimeInterval:
        """Bounding interval of the members' availability.

        Unbounded starts/stops are ignored when other members have finite
        ones. If no member has a finite start (stop), the result starts
        (stops) unbounded.
        """
        start_time = MAXIMUM_VALUE
        stop_time = MINIMUM_VALUE
        for entity in self._entities.values():
            availability = getattr(entity, "availability", None)
            if availability is None:
                continue
            start = availability.start
            stop = availability.stop
            if start < start_time and start != MINIMUM_VALUE:
                start_time = start
            if stop > stop_time and stop != MAXIMUM_VALUE:
                stop_time = stop

        if start_time == MAXIMUM_VALUE:
            start_time = MINIMUM_VALUE
        if stop_time == MINIMUM_VALUE:
            stop_time = MAXIMUM_VALUE
        return TimeInterval(start_time, stop_time)

    def __repr__(self) -> str:
        return f"EntityCollection(id={self._id!r}, entities={len(self._entities)})"
