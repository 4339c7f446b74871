"""Tests for location entities and tagged location references."""

import pytest
from pydantic import TypeAdapter, ValidationError

from rentrack.core.entities.location import (
    BaseLocationRef,
    CustomerLocation,
    CustomerLocationRef,
    LocationRef,
    LocationSpace,
    ResolvedLocation,
    UntaggedLocationRef,
    location_ref,
)

ref_adapter = TypeAdapter(LocationRef)


class TestLocationRef:
    """Tests for the tagged location reference union."""

    def test_discriminator_selects_variant(self):
        """Test the space field picks the reference class."""
        assert isinstance(ref_adapter.validate_python({"space": "base", "id": "WH1"}), BaseLocationRef)
        assert isinstance(
            ref_adapter.validate_python({"space": "customer", "id": "CL-TOY"}),
            CustomerLocationRef,
        )
        assert isinstance(
            ref_adapter.validate_python({"space": "untagged", "id": "7"}),
            UntaggedLocationRef,
        )

    def test_unknown_space_rejected(self):
        """Test an unknown space fails validation."""
        with pytest.raises(ValidationError):
            ref_adapter.validate_python({"space": "warehouse", "id": "WH1"})

    def test_same_id_different_space_not_equal(self):
        """Test colliding ids in different spaces stay distinct."""
        assert BaseLocationRef(id="7") != CustomerLocationRef(id="7")
        assert BaseLocationRef(id="7") == BaseLocationRef(id="7")

    def test_refs_are_hashable(self):
        """Test references can key a dict."""
        names = {BaseLocationRef(id="7"): "Yard 7", CustomerLocationRef(id="7"): "Customer Seven"}
        assert names[CustomerLocationRef(id="7")] == "Customer Seven"

    def test_refs_are_frozen(self):
        """Test references cannot be mutated."""
        ref = CustomerLocationRef(id="CL-TOY")
        with pytest.raises(ValidationError):
            ref.id = "CL-HON"

    @pytest.mark.parametrize(
        "space,expected",
        [
            ("base", BaseLocationRef),
            ("customer", CustomerLocationRef),
            ("untagged", UntaggedLocationRef),
            (LocationSpace.CUSTOMER, CustomerLocationRef),
        ],
    )
    def test_location_ref_factory(self, space, expected):
        """Test location_ref builds the variant for a space."""
        ref = location_ref(space, "X1")
        assert isinstance(ref, expected)
        assert ref.id == "X1"

    def test_location_ref_invalid_space(self):
        """Test location_ref rejects unknown spaces."""
        with pytest.raises(ValueError):
            location_ref("depot", "X1")


class TestCustomerLocation:
    """Tests for CustomerLocation."""

    def test_rate_table_parsed(self):
        """Test rates are kept per type code."""
        loc = CustomerLocation.model_validate(
            {
                "id": "CL-TOY",
                "customer_id": "C-TOY",
                "location_name": "Toyota Plant",
                "rate_table": {"PLT": "50"},
            }
        )
        assert loc.rate_table == {"PLT": 50.0}

    def test_rate_table_defaults_empty(self):
        loc = CustomerLocation(id="CL-TOY", customer_id="C-TOY", location_name="Toyota Plant")
        assert loc.rate_table == {}


class TestResolvedLocation:
    """Tests for ResolvedLocation defaults."""

    def test_defaults_to_unknown(self):
        resolved = ResolvedLocation(inventory_id="INV-1")
        assert resolved.location is None
        assert resolved.name == "Unknown"
        assert resolved.source == "none"
        assert resolved.event_id is None
