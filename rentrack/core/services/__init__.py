"""
Core business logic services.

Layer-pure services that depend only on:
- rentrack/core/entities/*
- rentrack/core/interfaces/*
- rentrack/core/exceptions.py

NO infrastructure imports. All dependencies injected via constructor.
"""

from rentrack.core.services.batch_grouper import BatchGrouper, new_batch_id
from rentrack.core.services.location_resolver import UNKNOWN_LOCATION, LocationResolver
from rentrack.core.services.rental_aggregator import RentalAggregator, billable_days
from rentrack.core.services.scan_session import (
    ScanEntry,
    ScanSession,
    check_receive_location,
)
from rentrack.core.services.status_machine import (
    WARN_CUSTOMER_TRANSFER,
    WARN_UNEXPECTED_IN,
    StatusStateMachine,
    TransitionCheck,
)

__all__ = [
    # Status
    "StatusStateMachine",
    "TransitionCheck",
    "WARN_CUSTOMER_TRANSFER",
    "WARN_UNEXPECTED_IN",
    # Batches
    "BatchGrouper",
    "new_batch_id",
    # Resolution
    "LocationResolver",
    "UNKNOWN_LOCATION",
    # Rental
    "RentalAggregator",
    "billable_days",
    # Scanning
    "ScanSession",
    "ScanEntry",
    "check_receive_location",
]
