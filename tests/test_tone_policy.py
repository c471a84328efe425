"""
Unit tests for the tone and filter policy.

Tests the rules:
1. blockers => issues, or titles mentioning bug / error / fix
2. achievements => commits and PRs, or titles mentioning complete / finish
3. meetings => calendar events only
4. code => commits and PRs only
5. Closings: > 5 tasks, 0 tasks, anything else
"""

import pytest

from autobrief.errors import InvalidArgument
from autobrief.services.tone_policy import (
    TONES,
    SummaryFilter,
    Tone,
    apply_filter,
    no_match_message,
    resolve_filter,
    resolve_tone,
)


@pytest.fixture
def mixed(activity_factory):
    return [
        activity_factory(activity_type="commit", title="Refactor parser"),
        activity_factory(activity_type="pr", title="Add export"),
        activity_factory(activity_type="issue", title="Crash on load"),
        activity_factory(provider="jira", activity_type="jira_issue", title="PROJ-1: Fix login ERROR"),
        activity_factory(provider="jira", activity_type="jira_issue", title="PROJ-2: Completed rollout"),
        activity_factory(provider="google_calendar", activity_type="calendar_event", title="Standup"),
        activity_factory(provider="slack", activity_type="slack_message", title="Finished the review"),
    ]


class TestApplyFilter:
    """Tests for apply_filter."""

    def test_all_keeps_everything(self, mixed):
        """The all filter returns the input unchanged."""
        assert apply_filter(mixed, SummaryFilter.ALL) == mixed

    def test_blockers(self, mixed):
        """Issues and bug / error / fix titles are blockers."""
        titles = [a.title for a in apply_filter(mixed, SummaryFilter.BLOCKERS)]
        assert titles == ["Crash on load", "PROJ-1: Fix login ERROR"]

    def test_blockers_match_is_case_insensitive(self, activity_factory):
        """Blocker keywords match in any case."""
        bug = activity_factory(activity_type="commit", title="Squash BUG in cache")
        assert apply_filter([bug], SummaryFilter.BLOCKERS) == [bug]

    def test_achievements(self, mixed):
        """Commits, PRs and complete / finish titles are achievements."""
        titles = [a.title for a in apply_filter(mixed, SummaryFilter.ACHIEVEMENTS)]
        assert titles == [
            "Refactor parser",
            "Add export",
            "PROJ-2: Completed rollout",
            "Finished the review",
        ]

    def test_meetings(self, mixed):
        """Only calendar events are meetings."""
        selected = apply_filter(mixed, SummaryFilter.MEETINGS)
        assert all(a.activity_type == "calendar_event" for a in selected)
        assert len(selected) == 1

    def test_code(self, mixed):
        """Only commits and PRs are code."""
        types = [a.activity_type for a in apply_filter(mixed, SummaryFilter.CODE)]
        assert types == ["commit", "pr"]

    def test_no_match_message(self):
        """The empty-filter message names the filter."""
        assert no_match_message(SummaryFilter.MEETINGS) == "No activities found matching filter: meetings"


class TestResolve:
    """Tests for tone / filter option parsing."""

    def test_defaults(self):
        """Missing options select professional and all."""
        assert resolve_tone(None) == Tone.PROFESSIONAL
        assert resolve_filter(None) == SummaryFilter.ALL

    def test_known_values(self):
        """Known names resolve to their enum members."""
        assert resolve_tone("casual") == Tone.CASUAL
        assert resolve_filter("code") == SummaryFilter.CODE

    def test_unknown_tone(self):
        """An unknown tone is rejected."""
        with pytest.raises(InvalidArgument):
            resolve_tone("sarcastic")

    def test_unknown_filter(self):
        """An unknown filter is rejected."""
        with pytest.raises(InvalidArgument):
            resolve_filter("everything")


class TestToneClosings:
    """Tests for the closing thresholds."""

    def test_professional_high(self):
        """More than five tasks is a high productivity day."""
        assert "High productivity day" in TONES[Tone.PROFESSIONAL].closing(6)

    def test_professional_zero(self):
        """Zero tasks is a low activity day."""
        assert "Low activity day" in TONES[Tone.PROFESSIONAL].closing(0)

    def test_professional_steady(self):
        """A few tasks is steady progress."""
        assert "Steady progress maintained" in TONES[Tone.PROFESSIONAL].closing(3)

    def test_threshold_is_strictly_greater_than_five(self):
        """Exactly five tasks is still steady progress."""
        assert "Steady progress maintained" in TONES[Tone.PROFESSIONAL].closing(5)

    @pytest.mark.parametrize("tone", list(Tone))
    def test_every_tone_has_three_distinct_closings(self, tone):
        """Each tone has a different closing per band."""
        preset = TONES[tone]
        assert len({preset.closing(0), preset.closing(2), preset.closing(10)}) == 3

    def test_greetings(self):
        """Greetings differ by tone."""
        assert TONES[Tone.PROFESSIONAL].greeting == "Daily Brief"
        assert TONES[Tone.FORMAL].greeting == "Daily Work Summary Report"
