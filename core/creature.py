"""
core/creature.py — Creature records for StatClash.

A CreatureRecord is the read-only view of one creature returned by the
lookup service: an id, a display name, a sprite URL and an ordered list of
named attribute values. Records are immutable so they can be shared freely
between the cache, the controller and the renderer.

Usage:
    record = CreatureRecord.from_payload(response_json)
    total_score(record)   # sum of all attribute values
"""

from __future__ import annotations
from dataclasses import dataclass, field

from core.errors import FetchError


@dataclass(frozen=True)
class CreatureRecord:
    """One creature with its attribute profile.

    Attributes:
        id:         Positive identifier assigned by the data source.
        name:       Display name.
        image_ref:  URL of the front sprite, or None if the source has none.
        attributes: Ordered (attribute name, value) pairs. Values are >= 0.
        types:      Type names, display only.
    """

    id:         int
    name:       str
    image_ref:  str | None
    attributes: tuple[tuple[str, int], ...]
    types:      tuple[str, ...] = field(default=())

    def __post_init__(self) -> None:
        if self.id <= 0:
            raise ValueError(f"creature id must be positive, got {self.id}")
        for attr_name, value in self.attributes:
            if value < 0:
                raise ValueError(f"attribute {attr_name!r} of {self.name!r} is negative")

    @classmethod
    def from_payload(cls, data: dict) -> CreatureRecord:
        """Build a record from a PokeAPI-shaped JSON object.

        Args:
            data: Decoded response body with id, name, sprites, stats, types.

        Returns:
            A new CreatureRecord.

        Raises:
            FetchError: If a required field is missing or malformed.
        """
        creature_id = data.get("id") if isinstance(data, dict) else None
        try:
            attributes = tuple(
                (str(stat["stat"]["name"]), int(stat["base_stat"]))
                for stat in data["stats"]
            )
            types = tuple(str(t["type"]["name"]) for t in data.get("types", []))
            sprite = (data.get("sprites") or {}).get("front_default")
            return cls(
                id=int(data["id"]),
                name=str(data["name"]),
                image_ref=sprite,
                attributes=attributes,
                types=types,
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise FetchError(
                f"malformed creature payload: {exc!r}",
                creature_id=creature_id,
            ) from exc

    @property
    def display_name(self) -> str:
        """Name with hyphens replaced and words capitalised."""
        return self.name.replace("-", " ").title()


def total_score(record: CreatureRecord) -> int:
    """Return the sum of all attribute values of a record."""
    return sum(value for _, value in record.attributes)
