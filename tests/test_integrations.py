"""
Tests for the provider sync adapters.

Provider APIs are replaced by FakeSession routing tables.
"""

from datetime import datetime, timezone

import pytest

from autobrief.errors import ProviderSyncError
from autobrief.integrations import (
    GitHubAdapter,
    GoogleCalendarAdapter,
    JiraAdapter,
    NotionAdapter,
    SlackAdapter,
    get_adapter,
)
from autobrief.integrations.base import parse_timestamp
from autobrief.integrations.google_calendar import event_duration_minutes, is_holiday
from autobrief.models.work_activity import TITLE_MAX_LENGTH

from fakes import FakeResponse, FakeSession


def local(*args):
    """UTC wall time converted to naive local time."""
    return datetime(*args, tzinfo=timezone.utc).astimezone().replace(tzinfo=None)


@pytest.fixture
def user(store):
    return store.create_user("ada", "ada@example.com")


class TestParseTimestamp:
    """Tests for parse_timestamp."""

    def test_zulu(self):
        """Z suffix is UTC, converted to local time."""
        assert parse_timestamp("2025-01-18T10:00:00Z") == local(2025, 1, 18, 10, 0)

    def test_jira_offset(self):
        """Jira's +0000 offsets without a colon are accepted."""
        assert parse_timestamp("2025-01-18T10:00:00.000+0000") == local(2025, 1, 18, 10, 0)

    def test_naive(self):
        """Timestamps without an offset are kept as is."""
        assert parse_timestamp("2025-01-18T10:00:00") == datetime(2025, 1, 18, 10, 0)

    def test_empty(self):
        """Missing timestamps parse to None."""
        assert parse_timestamp(None) is None


class TestGetAdapter:
    """Tests for the adapter registry."""

    def test_known_providers(self, store, settings):
        """Every supported provider maps to its adapter."""
        assert isinstance(get_adapter("github", store, settings), GitHubAdapter)
        assert isinstance(get_adapter("google_calendar", store, settings), GoogleCalendarAdapter)
        assert isinstance(get_adapter("jira", store, settings), JiraAdapter)
        assert isinstance(get_adapter("slack", store, settings), SlackAdapter)
        assert isinstance(get_adapter("notion", store, settings), NotionAdapter)

    def test_unsupported_provider(self, store, settings):
        """Unknown providers have no adapter."""
        assert get_adapter("linear", store, settings) is None


class TestGitHubAdapter:
    """Tests for GitHubAdapter.sync_user_data."""

    def routes(self, message="Fix auth bug\n\nLonger description"):
        return {
            "/user": FakeResponse(200, {"login": "octocat", "id": 1}),
            "/user/repos": FakeResponse(200, [{"full_name": "octocat/app"}]),
            "/repos/octocat/app/commits": FakeResponse(200, [{
                "sha": "abc123",
                "html_url": "https://github.com/octocat/app/commit/abc123",
                "commit": {
                    "message": message,
                    "author": {"name": "Octo", "date": "2025-01-18T10:00:00Z"},
                },
            }]),
            "/search/issues": FakeResponse(200, {"items": [{
                "number": 7,
                "title": "Add export",
                "state": "open",
                "updated_at": "2025-01-18T12:00:00Z",
                "repository_url": "https://api.github.com/repos/octocat/app",
                "labels": [{"name": "feature"}],
            }]}),
        }

    def test_sync_records_commits_prs_and_issues(self, store, settings, user):
        """Commits, PRs and issues are all stored against the integration."""
        integration = store.create_integration(user.id, "github", is_connected=True, access_token="gho_x")
        adapter = GitHubAdapter(store, settings, session=FakeSession(self.routes()))

        assert adapter.sync_user_data(integration) == 3

        commit = store.find_work_activity(user.id, "commit", "abc123")
        assert commit.title == "Fix auth bug"
        assert commit.integration_id == integration.id
        assert commit.extra["repository"] == "octocat/app"
        assert store.find_work_activity(user.id, "pr", "7").extra["labels"] == ["feature"]
        assert store.find_work_activity(user.id, "issue", "7") is not None
        assert integration.provider_username == "octocat"

    def test_resync_creates_nothing_new(self, store, settings, user):
        """A second sync of the same data creates no activities."""
        integration = store.create_integration(user.id, "github", is_connected=True, access_token="gho_x")
        adapter = GitHubAdapter(store, settings, session=FakeSession(self.routes()))

        adapter.sync_user_data(integration)

        assert adapter.sync_user_data(integration) == 0
        assert len(store.get_user_work_activities(user.id)) == 3

    def test_long_title_is_truncated(self, store, settings, user):
        """Titles longer than the column are cut to fit."""
        integration = store.create_integration(user.id, "github", is_connected=True, access_token="gho_x")
        adapter = GitHubAdapter(store, settings, session=FakeSession(self.routes(message="x" * 600)))

        adapter.sync_user_data(integration)

        title = store.find_work_activity(user.id, "commit", "abc123").title
        assert len(title) == TITLE_MAX_LENGTH
        assert title.endswith("...")

    def test_unauthorized_disconnects(self, store, settings, user):
        """A 401 marks the integration disconnected and re-raises."""
        integration = store.create_integration(user.id, "github", is_connected=True, access_token="bad")
        session = FakeSession({"/user": FakeResponse(401, {}, reason="Unauthorized")})

        with pytest.raises(ProviderSyncError) as excinfo:
            GitHubAdapter(store, settings, session=session).sync_user_data(integration)

        assert excinfo.value.status_code == 401
        assert excinfo.value.disconnected
        assert store.get_integration(integration.id).is_connected is False

    def test_missing_token(self, store, settings, user):
        """An integration without a token cannot sync."""
        integration = store.create_integration(user.id, "github", is_connected=True)
        with pytest.raises(ProviderSyncError):
            GitHubAdapter(store, settings, session=FakeSession()).sync_user_data(integration)


class TestGoogleCalendarAdapter:
    """Tests for GoogleCalendarAdapter and its helpers."""

    def test_sync_skips_holidays(self, store, settings, user):
        """Holiday calendars and holiday events are not stored."""
        integration = store.create_integration(
            user.id, "google_calendar", is_connected=True, access_token="ya29"
        )
        session = FakeSession({
            "/users/me/calendarList": FakeResponse(200, {"items": [
                {"id": "primary", "summary": "Work", "primary": True},
                {"id": "en.usa#holiday@group.v.calendar.google.com", "summary": "Holidays in United States"},
            ]}),
            "/calendars/primary/events": FakeResponse(200, {"items": [
                {
                    "id": "ev1",
                    "summary": "Standup",
                    "start": {"dateTime": "2025-01-18T09:00:00"},
                    "end": {"dateTime": "2025-01-18T09:30:00"},
                },
                {
                    "id": "ev2",
                    "summary": "Diwali celebration",
                    "start": {"date": "2025-01-18"},
                    "end": {"date": "2025-01-19"},
                },
            ]}),
            "holiday": FakeResponse(200, {"items": [{
                "id": "ev3",
                "summary": "Martin Luther King Jr. Day",
                "start": {"date": "2025-01-20"},
                "end": {"date": "2025-01-21"},
            }]}),
        })

        created = GoogleCalendarAdapter(store, settings, session=session).sync_user_data(integration)

        assert created == 1
        standup = store.find_work_activity(user.id, "calendar_event", "ev1")
        assert standup.timestamp == datetime(2025, 1, 18, 9, 0)
        assert standup.extra["duration"] == 30
        assert [c["name"] for c in integration.extra["calendars"]] == [
            "Work",
            "Holidays in United States",
        ]

    def test_is_holiday(self):
        """Holiday detection looks at the calendar name and event keywords."""
        assert is_holiday("Holidays in India", "Team sync")
        assert is_holiday("Work", "Christmas party")
        assert not is_holiday("Work", "Sprint planning")

    def test_event_duration(self):
        """Duration is whole minutes between start and end."""
        event = {
            "start": {"dateTime": "2025-01-18T09:00:00Z"},
            "end": {"dateTime": "2025-01-18T10:15:00Z"},
        }
        assert event_duration_minutes(event) == 75
        assert event_duration_minutes({"start": {}}) is None


class TestJiraAdapter:
    """Tests for JiraAdapter.sync_user_data."""

    def test_sync_records_issues_with_status(self, store, settings, user):
        """Issues are stored with their status and browse URL."""
        integration = store.create_integration(
            user.id,
            "jira",
            is_connected=True,
            access_token="atl",
            extra={"jiraSiteId": "site-1", "jiraUrl": "https://acme.atlassian.net"},
        )
        session = FakeSession({
            "/site-1/rest/api/3/myself": FakeResponse(200, {"displayName": "Ada"}),
            "/site-1/rest/api/3/search": FakeResponse(200, {"issues": [{
                "key": "PROJ-1",
                "fields": {
                    "summary": "Login fails",
                    "status": {"name": "In Progress"},
                    "priority": {"name": "High"},
                    "issuetype": {"name": "Bug"},
                    "updated": "2025-01-18T10:00:00.000+0000",
                },
            }]}),
        })

        assert JiraAdapter(store, settings, session=session).sync_user_data(integration) == 1

        issue = store.find_work_activity(user.id, "jira_issue", "PROJ-1")
        assert issue.title == "PROJ-1: Login fails"
        assert issue.extra["status"] == "In Progress"
        assert issue.extra["url"] == "https://acme.atlassian.net/browse/PROJ-1"
        assert integration.provider_username == "Ada"

    def test_incomplete_configuration(self, store, settings, user):
        """Without a site id the adapter refuses to sync."""
        integration = store.create_integration(user.id, "jira", is_connected=True, access_token="atl")
        with pytest.raises(ProviderSyncError, match="configuration incomplete"):
            JiraAdapter(store, settings, session=FakeSession()).sync_user_data(integration)


class TestSlackAdapter:
    """Tests for SlackAdapter."""

    @pytest.fixture
    def slack_settings(self, settings):
        return settings.model_copy(update={"slack_channel_id": "C123"})

    @staticmethod
    def routes(messages):
        return {
            "/conversations.history": FakeResponse(200, {"ok": True, "messages": messages}),
            "/auth.test": FakeResponse(200, {"ok": True, "user_id": "U1", "team_id": "T1"}),
            "/users.info": FakeResponse(200, {"ok": True, "user": {
                "name": "ada",
                "real_name": "Ada Lovelace",
                "profile": {"image_72": "https://example.com/ada.png"},
            }}),
        }

    def test_sync_records_messages(self, store, slack_settings, user):
        """User messages become slack_message activities keyed by ts."""
        integration = store.create_integration(user.id, "slack", is_connected=True, access_token="xoxb")
        session = FakeSession(self.routes([
            {"ts": "1737194400.000100", "user": "U1", "text": "Deployed the release"},
            {"ts": "1737194500.000200", "bot_id": "B1", "text": "Build passed"},
            {"ts": "1737194600.000300", "user": "U2", "text": ""},
        ]))

        created = SlackAdapter(store, slack_settings, session=session).sync_user_data(integration)

        assert created == 1
        message = store.find_work_activity(user.id, "slack_message", "1737194400.000100")
        assert message.provider == "slack"
        assert message.title == "Slack Message"
        assert message.description == "Deployed the release"
        assert message.timestamp == datetime.fromtimestamp(1737194400.0001)
        assert message.extra["url"] == "https://slack.com/archives/C123/p1737194400000100"
        assert session.calls[0]["params"]["channel"] == "C123"
        assert integration.extra["slackRealName"] == "Ada Lovelace"

    def test_resync_dedups_on_ts(self, store, slack_settings, user):
        """The same message ts is only stored once."""
        integration = store.create_integration(user.id, "slack", is_connected=True, access_token="xoxb")
        session = FakeSession(self.routes([{"ts": "1737194400.000100", "text": "hi"}]))
        adapter = SlackAdapter(store, slack_settings, session=session)

        adapter.sync_user_data(integration)

        assert adapter.sync_user_data(integration) == 0

    def test_long_message_description_is_shortened(self, store, slack_settings, user):
        """Descriptions keep the first 200 characters of the message."""
        integration = store.create_integration(user.id, "slack", is_connected=True, access_token="xoxb")
        session = FakeSession(self.routes([{"ts": "1737194400.000100", "text": "a" * 250}]))

        SlackAdapter(store, slack_settings, session=session).sync_user_data(integration)

        description = store.find_work_activity(user.id, "slack_message", "1737194400.000100").description
        assert description == "a" * 200 + "..."

    def test_no_channel_skips_messages(self, store, settings, user):
        """Without a channel only the profile is synced."""
        integration = store.create_integration(user.id, "slack", is_connected=True, access_token="xoxb")
        session = FakeSession(self.routes([{"ts": "1737194400.000100", "text": "hi"}]))

        assert SlackAdapter(store, settings, session=session).sync_user_data(integration) == 0
        assert all("conversations.history" not in call["url"] for call in session.calls)
        assert integration.extra["slackUserId"] == "U1"

    def test_api_error_disconnects(self, store, slack_settings, user):
        """An ok=false answer raises and marks the integration disconnected."""
        integration = store.create_integration(user.id, "slack", is_connected=True, access_token="xoxb")
        session = FakeSession({
            "/conversations.history": FakeResponse(200, {"ok": False, "error": "invalid_auth"}),
        })

        with pytest.raises(ProviderSyncError, match="invalid_auth") as excinfo:
            SlackAdapter(store, slack_settings, session=session).sync_user_data(integration)

        assert excinfo.value.disconnected
        assert store.get_integration(integration.id).is_connected is False

    def test_post_message(self, store, slack_settings, user):
        """Messages are posted to the team channel with chat.postMessage."""
        integration = store.create_integration(user.id, "slack", is_connected=True, access_token="xoxb")
        session = FakeSession({"/chat.postMessage": FakeResponse(200, {"ok": True, "ts": "1.2"})})

        SlackAdapter(store, slack_settings, session=session).post_message(integration, "*Daily Brief*")

        call = session.calls[0]
        assert call["method"] == "POST"
        assert call["json"] == {"channel": "C123", "text": "*Daily Brief*"}
        assert call["headers"]["Authorization"] == "Bearer xoxb"

    def test_post_message_without_channel(self, store, settings, user):
        """Posting needs a channel from the integration or the settings."""
        integration = store.create_integration(user.id, "slack", is_connected=True, access_token="xoxb")
        with pytest.raises(ProviderSyncError, match="No channel specified"):
            SlackAdapter(store, settings, session=FakeSession()).post_message(integration, "hi")

    def test_channel_from_integration_metadata(self, store, slack_settings, user):
        """The integration's own channel wins over the configured default."""
        integration = store.create_integration(
            user.id, "slack", is_connected=True, access_token="xoxb", extra={"slackChannelId": "C999"}
        )
        assert SlackAdapter(store, slack_settings).channel_for(integration) == "C999"


class TestNotionAdapter:
    """Tests for NotionAdapter.sync_user_data."""

    def test_sync_stores_workspace_user(self, store, settings, user):
        """A sync verifies the token and keeps the Notion user on the integration."""
        integration = store.create_integration(user.id, "notion", is_connected=True, access_token="secret_x")
        session = FakeSession({"/users/me": FakeResponse(200, {"object": "user", "name": "Ada"})})

        assert NotionAdapter(store, settings, session=session).sync_user_data(integration) == 0

        assert integration.extra["notionUser"]["name"] == "Ada"
        assert session.calls[0]["headers"]["Notion-Version"] == "2022-06-28"
        assert session.calls[0]["url"] == "https://api.notion.com/v1/users/me"

    def test_api_error(self, store, settings, user):
        """A non-2xx answer raises ProviderSyncError."""
        integration = store.create_integration(user.id, "notion", is_connected=True, access_token="bad")
        session = FakeSession({"/users/me": FakeResponse(401, {}, reason="Unauthorized")})
        with pytest.raises(ProviderSyncError, match="401"):
            NotionAdapter(store, settings, session=session).sync_user_data(integration)
