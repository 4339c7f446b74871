"""Abstract interface for the read-only location directory."""

from abc import ABC, abstractmethod

from rentrack.core.entities.location import (
    BaseLocationRef,
    CustomerLocation,
    CustomerLocationRef,
    Gate,
    Location,
    LocationRef,
)


class ILocationDirectory(ABC):
    """Lookup of base locations, customer locations and gates."""

    @abstractmethod
    async def get_location(self, location_id: str) -> Location | None:
        """Get a base/warehouse location."""
        pass

    @abstractmethod
    async def get_customer_location(self, location_id: str) -> CustomerLocation | None:
        """Get a customer location with its rate table."""
        pass

    @abstractmethod
    async def get_gate(self, gate_id: str) -> Gate | None:
        """Get a gate."""
        pass

    async def rate_table_of(self, customer_location_id: str) -> dict[str, float]:
        """Rate table of a customer location; empty when unknown."""
        location = await self.get_customer_location(customer_location_id)
        return dict(location.rate_table) if location else {}

    async def resolve_name(self, ref: LocationRef) -> str | None:
        """
        Human name of a referenced location.

        Tagged references consult only their own space. Untagged legacy
        references try the base space first, then the customer space.
        """
        if not isinstance(ref, CustomerLocationRef):
            location = await self.get_location(ref.id)
            if location is not None:
                return location.name
            if isinstance(ref, BaseLocationRef):
                return None
        customer_location = await self.get_customer_location(ref.id)
        return customer_location.location_name if customer_location else None
