"""
Pytest Configuration and Fixtures
"""

import os
import sys
from datetime import date, timedelta

import pytest

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(__file__)), 'src'))

# Set test environment
os.environ["API_KEY"] = "test-key-12345"
os.environ["LOAD_SAMPLE_DATA"] = "false"

from memberclub.config import ClubConfig
from memberclub.core.models import ItemKind, MembershipTier
from memberclub.system import ClubSystem


class FakeClock:
    """Settable stand-in for date.today."""

    def __init__(self, today: date):
        self.today = today

    def __call__(self) -> date:
        return self.today

    def advance(self, days: int) -> date:
        self.today = self.today + timedelta(days=days)
        return self.today


@pytest.fixture
def clock():
    return FakeClock(date(2024, 6, 1))


@pytest.fixture
def system(clock):
    """Empty club session on a fixed clock."""
    config = ClubConfig(
        api_key="test-key-12345",
        operator_username="operator",
        operator_password="s3cret",
        load_sample_data=False,
    )
    return ClubSystem(config=config, clock=clock)


@pytest.fixture
def tent(system):
    """Item priced 100/day, 20/hour."""
    return system.inventory.new_item(ItemKind.TENT, "Summer Breeze 2P", 100.0, 20.0, capacity=2)


@pytest.fixture
def kayak(system):
    """Item priced 80/day, 15/hour."""
    return system.inventory.new_item(ItemKind.KAYAK, "Angler Pro", 80.0, 15.0, seats=1)


@pytest.fixture
def standard_member(system):
    return system.members.register("Daniel Svensson", MembershipTier.STANDARD)


@pytest.fixture
def student_member(system):
    return system.members.register("Erik Johansson", MembershipTier.STUDENT)


@pytest.fixture
def premium_member(system):
    return system.members.register("Anders Karlsson", MembershipTier.PREMIUM)
