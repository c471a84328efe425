"""
AI Insights Service

Narrative reports generated by the Groq LLM from a user's recent activities:
smart summary, standup report, chat answers, productivity analysis, weekly
report, work pattern analysis and next-task suggestions.

Internal helpers return an LLMResult; the public methods turn a failed or
empty result into a fixed user-facing message and never raise for LLM or
store failures.
"""
import re
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from autobrief.errors import ErrorKind, InvalidArgument, LLMError
from autobrief.llm import prompts
from autobrief.llm.groq_client import LLMResult
from autobrief.logging_config import get_logger
from autobrief.services.aggregation import day_bounds
from autobrief.services.daily_summary_service import validate_user_id

logger = get_logger(__name__)

DEFAULT_USER_NAME = "Developer"
RECENT_ACTIVITY_LIMIT = 50
PATTERN_WINDOW_DAYS = 30
SUGGESTION_WINDOW_DAYS = 7
MAX_SUGGESTIONS = 5

SMART_SUMMARY_ERROR = "Error generating AI summary. Please try again."
SMART_SUMMARY_EMPTY = "Unable to generate summary"
STANDUP_ERROR = "Error generating standup report. Please try again."
STANDUP_EMPTY = "Unable to generate standup report"
CHAT_ERROR = "Sorry, I encountered an error processing your question. Please try again."
CHAT_EMPTY = "I could not process your question. Please try rephrasing it."
PRODUCTIVITY_ERROR = "Error analyzing productivity. Please try again."
PRODUCTIVITY_EMPTY = "Unable to analyze productivity"
WEEKLY_REPORT_ERROR = "Error generating weekly report. Please try again."
WEEKLY_REPORT_EMPTY = "Unable to generate weekly report"
WORK_PATTERNS_NO_DATA = "Not enough data to analyze work patterns."
WORK_PATTERNS_ERROR = "Unable to analyze work patterns at this time."
SUGGESTIONS_NO_DATA = ["Start by connecting your work tools to track activities"]
SUGGESTIONS_ERROR = ["Review recent work and plan next steps"]

_NUMBERING = re.compile(r"^\d+\.\s*")
_BULLET = re.compile(r"^[-*]\s*")


def parse_task_lines(text: str, limit: int = MAX_SUGGESTIONS) -> List[str]:
    """Split an LLM answer into task strings without list markers."""
    tasks = []
    for line in text.split("\n"):
        if not line.strip():
            continue
        task = _BULLET.sub("", _NUMBERING.sub("", line)).strip()
        if task:
            tasks.append(task)
    return tasks[:limit]


class AIInsightsService:
    """Builds prompts from stored activities and asks the LLM for narratives."""

    def __init__(self, store, llm_client, clock: Callable[[], datetime] = datetime.now):
        self.store = store
        self.llm = llm_client
        self.clock = clock

    # --- helpers ---

    def _user_name(self, user_id: int) -> str:
        user = self.store.get_user(user_id)
        if user is None:
            return DEFAULT_USER_NAME
        return user.display_name or DEFAULT_USER_NAME

    def _complete(
        self,
        build_prompt: Callable[[], str],
        params: prompts.CompletionParams,
        system: Optional[str] = None,
    ) -> LLMResult:
        """Build the prompt and run the completion, capturing any failure."""
        try:
            prompt = build_prompt()
            text = self.llm.chat_completion(
                prompt,
                temperature=params.temperature,
                max_tokens=params.max_tokens,
                system=system,
            )
        except LLMError as e:
            logger.error(f"Groq API error: {e}")
            return LLMResult.failure(e.kind, str(e))
        except Exception as e:
            logger.exception("Unexpected error while generating AI report")
            return LLMResult.failure(ErrorKind.STORE_FAILURE, str(e))

        if not text:
            return LLMResult.failure(ErrorKind.LLM_EMPTY_RESPONSE, "empty completion")
        return LLMResult(text=text)

    @staticmethod
    def _text_or(result: LLMResult, error_message: str, empty_message: str) -> str:
        if result.ok:
            return result.text
        if result.error_kind == ErrorKind.LLM_EMPTY_RESPONSE:
            return empty_message
        return error_message

    def _recent(self, user_id: int, limit: int = RECENT_ACTIVITY_LIMIT) -> List:
        return self.store.get_user_work_activities(user_id, limit)

    def _window(self, user_id: int, days: int) -> List:
        end = self.clock()
        return self.store.get_work_activities_by_date_range(
            user_id, end - timedelta(days=days), end
        )

    # --- result-returning variants ---

    def smart_summary_result(self, user_id: int) -> LLMResult:
        validate_user_id(user_id)
        return self._complete(
            lambda: prompts.smart_summary_prompt(
                self._recent(user_id), self._user_name(user_id), self.clock()
            ),
            prompts.SMART_SUMMARY,
        )

    def standup_report_result(self, user_id: int) -> LLMResult:
        validate_user_id(user_id)

        def build():
            start, end = day_bounds((self.clock() - timedelta(days=1)).date())
            yesterdays = self.store.get_work_activities_by_date_range(user_id, start, end)
            return prompts.standup_prompt(yesterdays, self._recent(user_id, 15))

        return self._complete(build, prompts.STANDUP_REPORT)

    def chat_result(self, user_id: int, query: str) -> LLMResult:
        validate_user_id(user_id)
        return self._complete(
            lambda: prompts.chat_prompt(
                query, self._recent(user_id), self._user_name(user_id), self.clock()
            ),
            prompts.CHAT_ANSWER,
        )

    def productivity_result(self, user_id: int, timeframe: str = "week") -> LLMResult:
        validate_user_id(user_id)
        return self._complete(
            lambda: prompts.productivity_prompt(self._recent(user_id), timeframe),
            prompts.PRODUCTIVITY_ANALYSIS,
        )

    def weekly_report_result(self, user_id: int) -> LLMResult:
        validate_user_id(user_id)
        return self._complete(
            lambda: prompts.weekly_report_prompt(
                self._window(user_id, 7), self._user_name(user_id), self.clock()
            ),
            prompts.WEEKLY_REPORT,
        )

    # --- public API ---

    def generate_smart_summary(self, user_id: int) -> str:
        return self._text_or(
            self.smart_summary_result(user_id), SMART_SUMMARY_ERROR, SMART_SUMMARY_EMPTY
        )

    def generate_standup_report(self, user_id: int) -> str:
        return self._text_or(self.standup_report_result(user_id), STANDUP_ERROR, STANDUP_EMPTY)

    def chat_with_data(self, user_id: int, query: str) -> str:
        if not isinstance(query, str) or not query.strip():
            raise InvalidArgument("query must be a non-empty string")
        return self._text_or(self.chat_result(user_id, query), CHAT_ERROR, CHAT_EMPTY)

    def analyze_productivity(self, user_id: int, timeframe: str = "week") -> str:
        return self._text_or(
            self.productivity_result(user_id, timeframe), PRODUCTIVITY_ERROR, PRODUCTIVITY_EMPTY
        )

    def generate_weekly_report(self, user_id: int) -> str:
        return self._text_or(
            self.weekly_report_result(user_id), WEEKLY_REPORT_ERROR, WEEKLY_REPORT_EMPTY
        )

    def analyze_work_patterns(self, user_id: int) -> str:
        """LLM analysis of the last 30 days' activity distribution."""
        validate_user_id(user_id)
        try:
            activities = self._window(user_id, PATTERN_WINDOW_DAYS)
        except Exception as e:
            logger.error(f"Error analyzing work patterns for user {user_id}: {e}")
            return WORK_PATTERNS_ERROR

        if not activities:
            return WORK_PATTERNS_NO_DATA

        result = self._complete(
            lambda: prompts.work_patterns_prompt(activities),
            prompts.WORK_PATTERNS,
            system=prompts.WORK_PATTERNS_SYSTEM,
        )
        return self._text_or(result, WORK_PATTERNS_ERROR, WORK_PATTERNS_ERROR)

    def suggest_next_tasks(self, user_id: int) -> List[str]:
        """Three to five next tasks based on the last week of activity."""
        validate_user_id(user_id)
        try:
            activities = self._window(user_id, SUGGESTION_WINDOW_DAYS)
        except Exception as e:
            logger.error(f"Error suggesting tasks for user {user_id}: {e}")
            return list(SUGGESTIONS_ERROR)

        if not activities:
            return list(SUGGESTIONS_NO_DATA)

        result = self._complete(
            lambda: prompts.task_suggestions_prompt(activities),
            prompts.TASK_SUGGESTIONS,
            system=prompts.TASK_SUGGESTIONS_SYSTEM,
        )
        if not result.ok:
            return list(SUGGESTIONS_ERROR)
        return parse_task_lines(result.text) or list(SUGGESTIONS_ERROR)
