"""Location directory entities and tagged location references.

Movement events point either into the base (warehouse) location space or into
the customer location space. A reference always carries its space so the
resolver never has to guess which directory an id belongs to. Rows written
before the space was recorded use the ``untagged`` variant.
"""

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


class LocationSpace(str, Enum):
    """Id spaces a location reference can point into."""

    BASE = "base"
    CUSTOMER = "customer"
    UNTAGGED = "untagged"


class BaseLocationRef(BaseModel):
    """Reference to a base/default (warehouse) location."""

    model_config = ConfigDict(frozen=True)

    space: Literal["base"] = "base"
    id: str


class CustomerLocationRef(BaseModel):
    """Reference to a customer location."""

    model_config = ConfigDict(frozen=True)

    space: Literal["customer"] = "customer"
    id: str


class UntaggedLocationRef(BaseModel):
    """Legacy reference whose id space was never recorded."""

    model_config = ConfigDict(frozen=True)

    space: Literal["untagged"] = "untagged"
    id: str


LocationRef = Annotated[
    BaseLocationRef | CustomerLocationRef | UntaggedLocationRef,
    Field(discriminator="space"),
]


def location_ref(space: LocationSpace | str, location_id: str) -> LocationRef:
    """Build the reference variant for ``space``."""
    space = LocationSpace(space)
    if space is LocationSpace.BASE:
        return BaseLocationRef(id=location_id)
    if space is LocationSpace.CUSTOMER:
        return CustomerLocationRef(id=location_id)
    return UntaggedLocationRef(id=location_id)


class Location(BaseModel):
    """Base/warehouse location."""

    id: str
    name: str
    status: str = "active"


class CustomerLocation(BaseModel):
    """A customer's location with its rental rate table."""

    id: str
    customer_id: str
    location_name: str
    rate_table: dict[str, float] = Field(default_factory=dict)


class Gate(BaseModel):
    """Physical scan checkpoint. Provenance only."""

    id: str
    name: str
    location_id: str | None = None
    type: str | None = None  # production / warehouse / dispatch
    status: str = "active"


class ResolvedLocation(BaseModel):
    """Where an item is, according to the ledger or its default location."""

    inventory_id: str
    location: LocationRef | None = None
    name: str = "Unknown"
    source: Literal["ledger", "default", "none"] = "none"
    event_id: int | None = None
