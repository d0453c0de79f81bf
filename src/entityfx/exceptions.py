"""Exceptions raised by entityfx."""

from __future__ import annotations


class EntityFxError(Exception):
    """Base class for all entityfx errors."""


class DeveloperError(EntityFxError, RuntimeError):
    """The API was misused: unbalanced resume, missing required argument."""


class DuplicateIdError(EntityFxError, ValueError):
    """An entity with the same id is already in the collection."""

    def __init__(self, entity_id: object) -> None:
        super().__init__(f"An entity with id {entity_id!r} already exists in this collection.")
        self.id = entity_id
