from autobrief.integrations.base import ProviderAdapter
from autobrief.integrations.github import GitHubAdapter
from autobrief.integrations.google_calendar import GoogleCalendarAdapter
from autobrief.integrations.jira import JiraAdapter
from autobrief.integrations.notion import NotionAdapter
from autobrief.integrations.slack import SlackAdapter

ADAPTERS = {
    "github": GitHubAdapter,
    "google_calendar": GoogleCalendarAdapter,
    "jira": JiraAdapter,
    "slack": SlackAdapter,
    "notion": NotionAdapter,
}


def get_adapter(provider: str, store, settings):
    """Instantiate the sync adapter for a provider, or None if unsupported."""
    adapter_class = ADAPTERS.get(provider)
    if adapter_class is None:
        return None
    return adapter_class(store, settings)


__all__ = [
    "ProviderAdapter",
    "GitHubAdapter",
    "GoogleCalendarAdapter",
    "JiraAdapter",
    "NotionAdapter",
    "SlackAdapter",
    "ADAPTERS",
    "get_adapter",
]
