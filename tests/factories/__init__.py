"""Test factories for creating test data."""

from tests.factories.packs import FlakyEntityStore, PackFactory

__all__ = [
    "FlakyEntityStore",
    "PackFactory",
]
