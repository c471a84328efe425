"""
Tone and Filter Policy

Filters (applied to the whole day's activity list, before grouping):
- blockers      => activity_type == issue, or title mentions bug / error / fix
- achievements  => commit or pr, or title mentions complete / finish
- meetings      => calendar_event
- code          => commit or pr
- all           => everything

Tones only swap the greeting at the top of the brief and the closing line at
the bottom. The closing depends on the total task count: > 5, == 0, or else.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional

from autobrief.errors import InvalidArgument


class Tone(str, Enum):
    FRIENDLY = "friendly"
    CASUAL = "casual"
    FORMAL = "formal"
    PROFESSIONAL = "professional"


class SummaryFilter(str, Enum):
    ALL = "all"
    BLOCKERS = "blockers"
    ACHIEVEMENTS = "achievements"
    MEETINGS = "meetings"
    CODE = "code"


DEFAULT_TONE = Tone.PROFESSIONAL
DEFAULT_FILTER = SummaryFilter.ALL

HIGH_ACTIVITY_THRESHOLD = 5


@dataclass(frozen=True)
class TonePreset:
    greeting: str
    high: str
    none: str
    steady: str

    def closing(self, total_tasks: int) -> str:
        if total_tasks > HIGH_ACTIVITY_THRESHOLD:
            return self.high
        if total_tasks == 0:
            return self.none
        return self.steady


TONES: Dict[Tone, TonePreset] = {
    Tone.FRIENDLY: TonePreset(
        greeting="Hey there! Here's what you accomplished today 😊",
        high="🚀 **Awesome work today!** You crushed it! 🎉",
        none="💪 **Tomorrow's a new day** - let's make it count!",
        steady="👍 **Solid day!** Keep up the great momentum!",
    ),
    Tone.CASUAL: TonePreset(
        greeting="Here's your daily wrap-up 👋",
        high="🔥 **Killed it today!**",
        none="🤷 **Slow day** - happens to the best of us",
        steady="👌 **Not bad!**",
    ),
    Tone.FORMAL: TonePreset(
        greeting="Daily Work Summary Report",
        high="📈 **Exceptional productivity achieved**",
        none="⚠️ **Below average activity recorded**",
        steady="✓ **Satisfactory progress maintained**",
    ),
    Tone.PROFESSIONAL: TonePreset(
        greeting="Daily Brief",
        high="🚀 **High productivity day** - Great work!",
        none="⚠️ **Low activity day** - Consider reviewing goals",
        steady="📊 **Steady progress maintained**",
    ),
}


def resolve_tone(value: Optional[str]) -> Tone:
    if value is None or value == "":
        return DEFAULT_TONE
    try:
        return Tone(value)
    except ValueError:
        raise InvalidArgument(
            f"Unknown tone {value!r}, expected one of {[t.value for t in Tone]}"
        )


def resolve_filter(value: Optional[str]) -> SummaryFilter:
    if value is None or value == "":
        return DEFAULT_FILTER
    try:
        return SummaryFilter(value)
    except ValueError:
        raise InvalidArgument(
            f"Unknown filter {value!r}, expected one of {[f.value for f in SummaryFilter]}"
        )


def _title(activity) -> str:
    return (activity.title or "").lower()


def _is_blocker(activity) -> bool:
    title = _title(activity)
    return (
        activity.activity_type == "issue"
        or "bug" in title
        or "error" in title
        or "fix" in title
    )


def _is_achievement(activity) -> bool:
    title = _title(activity)
    return (
        activity.activity_type in ("commit", "pr")
        or "complete" in title
        or "finish" in title
    )


def _is_meeting(activity) -> bool:
    return activity.activity_type == "calendar_event"


def _is_code(activity) -> bool:
    return activity.activity_type in ("commit", "pr")


FILTER_PREDICATES: Dict[SummaryFilter, Callable] = {
    SummaryFilter.BLOCKERS: _is_blocker,
    SummaryFilter.ACHIEVEMENTS: _is_achievement,
    SummaryFilter.MEETINGS: _is_meeting,
    SummaryFilter.CODE: _is_code,
}


def apply_filter(activities: List, summary_filter: SummaryFilter) -> List:
    """Return the activities selected by the filter, in original order."""
    predicate = FILTER_PREDICATES.get(summary_filter)
    if predicate is None:
        return list(activities)
    return [a for a in activities if predicate(a)]


def no_match_message(summary_filter: SummaryFilter) -> str:
    return f"No activities found matching filter: {summary_filter.value}"
