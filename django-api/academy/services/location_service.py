"""Location (room) service."""

import logging
from typing import Any

from academy.domain import Location, LocationId, NewLocation
from academy.domain.errors import LocationInUseError, LocationNotFoundError
from academy.stores.interfaces import LocationStore

logger = logging.getLogger(__name__)

DEFAULT_BRANCH = "Sidoarjo"


class LocationService:
    """Service for managing the rooms of the branch."""

    def __init__(self, store: LocationStore, default_branch: str = DEFAULT_BRANCH) -> None:
        self._store = store
        self._default_branch = default_branch

    def list_locations(self) -> list[Location]:
        return self._store.list_locations()

    def create_location(self, name: str, branch: str | None = None) -> Location:
        location = self._store.create_location(
            NewLocation(name=name, branch=branch or self._default_branch)
        )
        logger.info("Created location %s (%s)", location.id.value, location.name)
        return location

    def update_location(self, location_id: int, **changes: Any) -> Location:
        """Apply a partial update.

        Raises:
            LocationNotFoundError: If the location does not exist.
        """
        lid = LocationId(location_id)
        location = self._store.get_location(lid)
        if location is None:
            raise LocationNotFoundError(location_id)
        if not changes:
            return location
        return self._store.update_location(lid, changes)

    def delete_location(self, location_id: int) -> None:
        """Delete a room that no class uses.

        Raises:
            LocationNotFoundError: If the location does not exist.
            LocationInUseError: If classes are still held in the room.
        """
        lid = LocationId(location_id)
        if self._store.get_location(lid) is None:
            raise LocationNotFoundError(location_id)
        in_use = self._store.count_classes_at_location(lid)
        if in_use:
            raise LocationInUseError(location_id, in_use)
        self._store.delete_location(lid)
        logger.info("Deleted location %s", location_id)
