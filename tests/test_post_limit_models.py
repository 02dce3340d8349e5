"""
Tests for post limit parsing and quota snapshots.
"""
import pytest

from app.post_limit.models import QuotaSnapshot, coerce_stored_limit, parse_post_limit
from app.post_limit.templates import NOTICE_CLASS, render_notice, render_profile_section


class TestParsePostLimit:
    """Validation of submitted limits."""

    @pytest.mark.parametrize("raw,expected", [
        ("0", 0),
        ("1", 1),
        ("25", 25),
        ("+4", 4),
        (" 12 ", 12),
        ("\t3\n", 3),
    ])
    def test_valid(self, raw, expected):
        assert parse_post_limit(raw) == expected

    @pytest.mark.parametrize("raw", [
        None, "", "   ", "abc", "1.5", "1e3", "007", "-1", "-0x", "3 posts", "٣",
    ])
    def test_invalid(self, raw):
        assert parse_post_limit(raw) is None

    def test_minus_zero_is_zero(self):
        """Test that a signed zero is still zero."""
        assert parse_post_limit("-0") == 0


class TestCoerceStoredLimit:
    """Reading limits back from user metadata."""

    def test_unset_is_unlimited(self):
        assert coerce_stored_limit(None) == 0
        assert coerce_stored_limit("") == 0

    def test_integers_pass_through(self):
        assert coerce_stored_limit(5) == 5
        assert coerce_stored_limit(0) == 0

    def test_numeric_strings(self):
        """Test that limits stored as strings are understood."""
        assert coerce_stored_limit("7") == 7

    @pytest.mark.parametrize("value", ["many", -3, "-3", True, 2.5])
    def test_unusable_values_are_unlimited(self, value):
        assert coerce_stored_limit(value, "alice") == 0


class TestQuotaSnapshot:
    """Derived predicates."""

    def test_unlimited(self):
        snapshot = QuotaSnapshot(user_id="alice", limit=0, count=9)
        assert snapshot.has_limit is False
        assert snapshot.at_limit is False
        assert snapshot.at_or_over_limit is False
        assert snapshot.remaining is None

    def test_below_limit(self):
        snapshot = QuotaSnapshot(user_id="alice", limit=3, count=1)
        assert snapshot.at_or_over_limit is False
        assert snapshot.remaining == 2

    def test_exactly_at_limit(self):
        snapshot = QuotaSnapshot(user_id="alice", limit=3, count=3)
        assert snapshot.at_limit is True
        assert snapshot.at_or_over_limit is True
        assert snapshot.remaining == 0

    def test_over_limit(self):
        """Test that going over the limit is not 'at' it but still blocks."""
        snapshot = QuotaSnapshot(user_id="alice", limit=3, count=5)
        assert snapshot.at_limit is False
        assert snapshot.at_or_over_limit is True
        assert snapshot.remaining == 0

    def test_to_dict(self):
        data = QuotaSnapshot(user_id="alice", limit=2, count=1).to_dict()
        assert data == {
            "user_id": "alice",
            "limit": 2,
            "count": 1,
            "remaining": 1,
            "has_limit": True,
            "at_limit": False,
            "at_or_over_limit": False,
        }


class TestTemplates:
    """HTML fragments."""

    def test_profile_section(self):
        html = str(render_profile_section("post-limit", 4))
        assert "<h3>Limit Posts</h3>" in html
        assert "Post Limit (0 for no limit)" in html
        assert 'name="post-limit"' in html
        assert 'value="4"' in html

    def test_notice_escapes_message(self):
        html = str(render_notice("<b>hi</b>"))
        assert f'class="{NOTICE_CLASS}"' in html
        assert "&lt;b&gt;hi&lt;/b&gt;" in html
