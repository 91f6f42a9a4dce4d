"""
Fixtures for identifier allocation tests.
"""

from unittest.mock import patch

import pytest


class FakeIdentifierStore:
    """
    In-memory stand-in for the identifier repository.

    ``stored`` plays the role of identifiers already persisted in the
    record tables; ``counters`` the sequence_counters table.
    """

    def __init__(self, stored=None):
        self.stored = list(stored or [])
        self.counters = {}

    async def find_latest_by_prefix(self, db, category, prefix):
        matches = [identifier for identifier in self.stored if identifier.startswith(prefix)]
        return max(matches) if matches else None

    async def increment_counter(self, db, category, date_stamp):
        key = (category, date_stamp)
        if key not in self.counters:
            return None
        self.counters[key] += 1
        return self.counters[key]

    async def seed_or_increment_counter(self, db, category, date_stamp, seed):
        key = (category, date_stamp)
        self.counters[key] = self.counters[key] + 1 if key in self.counters else seed
        return self.counters[key]


@pytest.fixture
def store():
    """Patch the allocator's repository with an empty in-memory store."""
    fake = FakeIdentifierStore()
    with patch("app.modules.identifiers.allocator.repository", fake):
        yield fake
