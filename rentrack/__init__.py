"""RENTrack inventory movement and location-resolution engine."""

__version__ = "1.0.0"
