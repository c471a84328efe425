"""
Application configuration.

All settings are read once from the environment (and a local .env file) into
a Settings object that is passed explicitly to the store, LLM client, email
service and provider adapters.
"""
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel


DEFAULT_DATABASE_URL = "sqlite:///./autobrief.db"


class Settings(BaseModel):
    database_url: str = DEFAULT_DATABASE_URL
    debug: bool = False
    log_level: str = "INFO"

    # Groq chat completions (OpenAI-compatible API)
    groq_api_key: Optional[str] = None
    groq_api_url: str = "https://api.groq.com/openai/v1/chat/completions"
    groq_model: str = "llama3-8b-8192"

    # Resend email delivery
    resend_api_key: Optional[str] = None
    resend_api_url: str = "https://api.resend.com/emails"
    email_from: str = "onboarding@resend.dev"

    # Provider APIs
    github_api_url: str = "https://api.github.com"
    google_calendar_api_url: str = "https://www.googleapis.com/calendar/v3"
    jira_api_url: str = "https://api.atlassian.com/ex/jira"
    slack_api_url: str = "https://slack.com/api"
    slack_channel_id: Optional[str] = None
    notion_api_url: str = "https://api.notion.com/v1"
    notion_version: str = "2022-06-28"

    http_timeout: float = 30.0

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> "Settings":
        """Build settings from environment variables."""
        if load_env_file:
            load_dotenv()

        defaults = cls()
        return cls(
            database_url=os.getenv("DATABASE_URL", defaults.database_url),
            debug=os.getenv("DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", defaults.log_level).upper(),
            groq_api_key=os.getenv("GROQ_API_KEY") or None,
            groq_api_url=os.getenv("GROQ_API_URL", defaults.groq_api_url),
            groq_model=os.getenv("GROQ_MODEL", defaults.groq_model),
            resend_api_key=os.getenv("RESEND_API_KEY") or None,
            resend_api_url=os.getenv("RESEND_API_URL", defaults.resend_api_url),
            email_from=os.getenv("EMAIL_FROM", defaults.email_from),
            github_api_url=os.getenv("GITHUB_API_URL", defaults.github_api_url),
            google_calendar_api_url=os.getenv(
                "GOOGLE_CALENDAR_API_URL", defaults.google_calendar_api_url
            ),
            jira_api_url=os.getenv("JIRA_API_URL", defaults.jira_api_url),
            slack_api_url=os.getenv("SLACK_API_URL", defaults.slack_api_url),
            slack_channel_id=os.getenv("SLACK_CHANNEL_ID") or None,
            notion_api_url=os.getenv("NOTION_API_URL", defaults.notion_api_url),
            notion_version=os.getenv("NOTION_VERSION", defaults.notion_version),
            http_timeout=float(os.getenv("HTTP_TIMEOUT", str(defaults.http_timeout))),
        )

    @property
    def sqlalchemy_url(self) -> str:
        """Database URL with the psycopg (v3) driver forced for PostgreSQL."""
        url = self.database_url
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+psycopg://", 1)
        elif url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql+psycopg://", 1)
        return url
