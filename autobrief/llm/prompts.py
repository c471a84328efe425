"""
Prompt templates for the AI narrative reports.

Each report samples a bounded slice of the user's most recent activities
(newest first) and embeds it as JSON, so token usage stays predictable.
"""
import json
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, List, Optional


@dataclass(frozen=True)
class CompletionParams:
    temperature: float
    max_tokens: int


SMART_SUMMARY = CompletionParams(temperature=0.7, max_tokens=800)
STANDUP_REPORT = CompletionParams(temperature=0.6, max_tokens=600)
CHAT_ANSWER = CompletionParams(temperature=0.5, max_tokens=500)
PRODUCTIVITY_ANALYSIS = CompletionParams(temperature=0.6, max_tokens=700)
WEEKLY_REPORT = CompletionParams(temperature=0.7, max_tokens=800)
WORK_PATTERNS = CompletionParams(temperature=0.7, max_tokens=1000)
TASK_SUGGESTIONS = CompletionParams(temperature=0.7, max_tokens=1000)

WORK_PATTERNS_SYSTEM = (
    "You are a productivity analyst. Analyze work patterns and provide actionable "
    "insights about productivity, work habits, and recommendations for improvement. "
    "Be specific and helpful."
)
TASK_SUGGESTIONS_SYSTEM = (
    "You are a productivity assistant. Based on recent work activities, suggest 3-5 "
    "specific, actionable next tasks. Be practical and relevant to the work being done."
)


def short_date(value: datetime) -> str:
    """US-style short date, e.g. 1/18/2025."""
    return f"{value.month}/{value.day}/{value.year}"


def _truncate(text: Optional[str], limit: int) -> str:
    return (text or "")[:limit]


def sample_activities(
    activities: List,
    limit: int,
    title_limit: Optional[int] = 100,
    date_key: Optional[str] = "date",
    include_hour: bool = False,
) -> List[Dict]:
    """Compact JSON-able view of the first `limit` activities."""
    sampled = []
    for activity in activities[:limit]:
        item = {"type": activity.activity_type}
        if title_limit is not None:
            item["title"] = _truncate(activity.title, title_limit)
        item["provider"] = activity.provider
        if date_key:
            item[date_key] = short_date(activity.timestamp)
        if include_hour:
            item["hour"] = activity.timestamp.hour
        sampled.append(item)
    return sampled


def _dumps(data) -> str:
    return json.dumps(data, ensure_ascii=False)


def smart_summary_prompt(activities: List, user_name: str, now: datetime) -> str:
    recent = sample_activities(activities, 20, title_limit=100, date_key="timestamp")
    return f"""
Analyze these developer activities and create a daily summary:

Activities ({len(recent)} items):
{_dumps(recent)}

User: {user_name}
Date: {short_date(now)}

Create a summary with:
🎯 Key Accomplishments
📊 Activity Breakdown
⚡ Productivity Insights
🚀 Tomorrow's Focus
⚠️ Blockers & Concerns

Keep it concise and professional.
"""


def standup_prompt(yesterdays: List, recent_activities: List) -> str:
    yesterday_work = sample_activities(yesterdays, 10, title_limit=80, date_key=None)
    recent = sample_activities(recent_activities, 15, title_limit=60)
    return f"""
Generate a standup report:

Yesterday's work:
{_dumps(yesterday_work)}

Recent context:
{_dumps(recent)}

Format:
**Yesterday I worked on:**
**Today I plan to:**
**Blockers/Help needed:**

Keep it concise and professional.
"""


def chat_prompt(query: str, activities: List, user_name: str, now: datetime) -> str:
    limited = sample_activities(activities, 30, title_limit=100)
    return f"""
Answer this question about the developer's work data:

Question: "{query}"

Activities ({len(limited)} recent items):
{_dumps(limited)}

User: {user_name}
Date: {short_date(now)}

Provide a direct, helpful answer with specific data and insights.
"""


def productivity_prompt(activities: List, timeframe: str = "week") -> str:
    data = sample_activities(activities, 50, title_limit=None, include_hour=True)
    return f"""
Analyze productivity patterns:

Data ({len(data)} activities, {timeframe}):
{_dumps(data)}

Provide:
1. Productivity Patterns
2. Work Distribution
3. Efficiency Insights
4. Recommendations
5. Strengths
6. Areas for Improvement

Be specific with actionable recommendations.
"""


def weekly_report_prompt(activities: List, user_name: str, now: datetime) -> str:
    week_ago = now - timedelta(days=7)
    this_week = [a for a in activities if a.timestamp >= week_ago]
    weekly = sample_activities(this_week, 40, title_limit=80)
    return f"""
Generate a weekly report:

Week's Activities ({len(weekly)} items):
{_dumps(weekly)}

User: {user_name}

Include:
📈 Week Overview
💻 Development Work
🤝 Collaboration
📊 Productivity Metrics
🎯 Goals & Progress
📋 Next Week's Focus

Make it professional for managers/1:1 meetings.
"""


def work_patterns(activities: List) -> Dict:
    """Counts by provider, activity type and hour of day."""
    by_provider: Dict[str, int] = {}
    by_type: Dict[str, int] = {}
    by_hour: Dict[int, int] = {}
    for activity in activities:
        by_provider[activity.provider] = by_provider.get(activity.provider, 0) + 1
        by_type[activity.activity_type] = by_type.get(activity.activity_type, 0) + 1
        hour = activity.timestamp.hour
        by_hour[hour] = by_hour.get(hour, 0) + 1
    return {
        "totalActivities": len(activities),
        "byProvider": by_provider,
        "byType": by_type,
        "byHour": {str(hour): count for hour, count in sorted(by_hour.items())},
    }


def work_patterns_prompt(activities: List) -> str:
    return (
        "Analyze these work patterns and provide insights: "
        + json.dumps(work_patterns(activities), indent=2)
    )


def task_suggestions_prompt(activities: List) -> str:
    recent_work = [
        {"type": a.activity_type, "title": a.title, "provider": a.provider}
        for a in activities[:10]
    ]
    return (
        "Based on these recent activities, suggest next tasks: "
        + json.dumps(recent_work, indent=2)
    )
