from autobrief.services.aggregation import (
    collect_day,
    day_bounds,
    group_by_provider,
    parse_date,
)
from autobrief.services.tone_policy import (
    Tone,
    SummaryFilter,
    TONES,
    apply_filter,
)
from autobrief.services.summary_formatter import (
    format_daily_brief,
    format_example_brief,
)
from autobrief.services.daily_summary_service import (
    generate_daily_summary,
    save_daily_summary,
)
from autobrief.services.ai_insights import AIInsightsService

__all__ = [
    'collect_day',
    'day_bounds',
    'group_by_provider',
    'parse_date',
    'Tone',
    'SummaryFilter',
    'TONES',
    'apply_filter',
    'format_daily_brief',
    'format_example_brief',
    'generate_daily_summary',
    'save_daily_summary',
    'AIInsightsService',
]
