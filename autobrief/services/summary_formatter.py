"""
Summary Formatter

Turns provider-grouped activities into the Markdown daily brief.

Section order is fixed: GitHub, Calendar, Jira, Slack. Providers without a
dedicated section (e.g. Notion) are listed afterwards in a generic section,
in the order they first appear. Totals at the bottom count GitHub + Jira
activities as tasks and Calendar activities as meetings.

Output is a pure function of its inputs; the only date used is the one
passed in.
"""

from datetime import date
from typing import Callable, Dict, List

from autobrief.services.tone_policy import TonePreset, TONES, DEFAULT_TONE


BULLET = "   • "
COMMITS_LISTED = 3

PROVIDER_ORDER = ("github", "google_calendar", "jira", "slack")

PROVIDER_DISPLAY_NAMES = {
    "github": "GitHub",
    "google_calendar": "Google Calendar",
    "jira": "Jira",
    "slack": "Slack",
    "notion": "Notion",
}


def format_brief_date(day: date) -> str:
    """'Saturday, January 18' style date used in headings."""
    return f"{day:%A}, {day:%B} {day.day}"


def _format_number(value) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _metadata(activity) -> dict:
    return activity.extra or {}


def render_github(activities: List) -> List[str]:
    commits = [a for a in activities if a.activity_type == "commit"]
    prs = [a for a in activities if a.activity_type == "pr"]
    issues = [a for a in activities if a.activity_type == "issue"]

    lines = ["## 🔧 GitHub"]
    if commits:
        lines.append(f"✅ **{len(commits)} commits pushed**")
        lines.extend(f"{BULLET}{c.title}" for c in commits[:COMMITS_LISTED])
    if prs:
        lines.append(f"✅ **{len(prs)} pull requests**")
        lines.extend(f"{BULLET}{pr.title}" for pr in prs)
    if issues:
        lines.append(f"⚠️ **{len(issues)} issues worked on**")
        lines.extend(f"{BULLET}{issue.title}" for issue in issues)
    return lines


def render_calendar(activities: List) -> List[str]:
    lines = ["## 📅 Calendar Summary", f"📝 **{len(activities)} meetings attended**"]
    for meeting in activities:
        duration = _metadata(meeting).get("duration")
        suffix = f" ({_format_number(duration)}m)" if duration else ""
        lines.append(f"{BULLET}{meeting.title}{suffix}")
    return lines


def render_jira(activities: List) -> List[str]:
    lines = ["## 🎯 Jira", f"✅ **{len(activities)} issues updated**"]
    for issue in activities:
        status = _metadata(issue).get("status")
        suffix = f" [{status}]" if status else ""
        lines.append(f"{BULLET}{issue.title}{suffix}")
    return lines


def render_slack(activities: List) -> List[str]:
    # Slack is summarized, never enumerated
    return [
        "## 💬 Slack",
        "📝 **Team communication active**",
        f"{BULLET}{len(activities)} interactions tracked",
    ]


def render_generic(provider: str, activities: List) -> List[str]:
    name = PROVIDER_DISPLAY_NAMES.get(provider, provider.replace("_", " ").title())
    lines = [f"## 🔗 {name}", f"📝 **{len(activities)} activities tracked**"]
    lines.extend(f"{BULLET}{a.title}" for a in activities)
    return lines


SECTION_RENDERERS: Dict[str, Callable[[List], List[str]]] = {
    "github": render_github,
    "google_calendar": render_calendar,
    "jira": render_jira,
    "slack": render_slack,
}


def format_daily_brief(groups: Dict[str, List], day: date, tone: TonePreset = None) -> str:
    """Render the brief for already-filtered, provider-grouped activities."""
    tone = tone or TONES[DEFAULT_TONE]

    sections: List[List[str]] = []
    for provider in PROVIDER_ORDER:
        if groups.get(provider):
            sections.append(SECTION_RENDERERS[provider](groups[provider]))
    for provider, activities in groups.items():
        if provider not in SECTION_RENDERERS and activities:
            sections.append(render_generic(provider, activities))

    total_tasks = len(groups.get("github", [])) + len(groups.get("jira", []))
    total_meetings = len(groups.get("google_calendar", []))

    out = f"# {tone.greeting} - {format_brief_date(day)}\n\n"
    for lines in sections:
        out += "\n".join(lines) + "\n\n"
    out += "## 📊 Daily Summary\n"
    out += f"✅ **{total_tasks} tasks completed**\n"
    out += f"📝 **{total_meetings} meetings attended**\n"
    out += tone.closing(total_tasks) + "\n"
    return out


def format_example_brief(day: date) -> str:
    """Fixed sample brief shown when the user has no activity for the date."""
    return (
        f"# Daily Brief - {format_brief_date(day)}\n"
        "\n"
        "## 🔧 GitHub\n"
        "✅ **2 commits pushed**\n"
        "   • Fix authentication bug\n"
        "   • Update user dashboard\n"
        "\n"
        "## 📅 Calendar Summary\n"
        "📝 **1 meeting attended**\n"
        "   • Team standup (30m)\n"
        "\n"
        "## 📊 Daily Summary\n"
        "✅ **2 tasks completed**\n"
        "📝 **1 meeting attended**\n"
        "🚀 **Steady progress maintained**"
    )
