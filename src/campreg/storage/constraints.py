"""Collection names and the unique indexes every store adapter enforces."""

from dataclasses import dataclass
from typing import Any

USERS = "users"
ROLES = "roles"
CAMPERS = "campers"
REGISTRATIONS = "registrations"

COLLECTIONS: tuple[str, ...] = (USERS, ROLES, CAMPERS, REGISTRATIONS)


@dataclass(frozen=True)
class UniqueIndex:
    """A unique index over one or more document fields.

    Documents with a missing or null value in any indexed field are not
    indexed, so optional fields behave as sparse indexes.
    """

    fields: tuple[str, ...]

    def key_for(self, document: dict[str, Any]) -> tuple[Any, ...] | None:
        values = tuple(document.get(field) for field in self.fields)
        if any(value is None for value in values):
            return None
        return values

    @property
    def name(self) -> str:
        return "+".join(self.fields)


UNIQUE_INDEXES: dict[str, tuple[UniqueIndex, ...]] = {
    USERS: (UniqueIndex(("username",)), UniqueIndex(("amka",))),
    ROLES: (UniqueIndex(("name",)),),
    CAMPERS: (UniqueIndex(("amka",)),),
    REGISTRATIONS: (UniqueIndex(("camper", "camp_period")),),
}
