"""Test helpers for lodge_admin tests.

Helpers:
    FakeTimeAuthority: Controllable time authority for deterministic tests
    make_member / make_roster_entry: Raw backend record builders

Usage:
    from tests.helpers import FakeTimeAuthority, make_member
"""

from tests.helpers.builders import make_member, make_roster_entry
from tests.helpers.fake_time_authority import FakeTimeAuthority

__all__ = ["FakeTimeAuthority", "make_member", "make_roster_entry"]
