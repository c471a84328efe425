"""Exception types raised by the AutoBrief core."""
from enum import Enum


class ErrorKind(str, Enum):
    INVALID_ARGUMENT = "invalid_argument"
    NO_DATA = "no_data"
    LLM_UNAVAILABLE = "llm_unavailable"
    LLM_EMPTY_RESPONSE = "llm_empty_response"
    STORE_FAILURE = "store_failure"
    PROVIDER_FAILURE = "provider_failure"


class AutoBriefError(Exception):
    """Base class for AutoBrief errors."""

    kind = ErrorKind.STORE_FAILURE


class InvalidArgument(AutoBriefError, ValueError):
    """A public entry point was called with a malformed argument."""

    kind = ErrorKind.INVALID_ARGUMENT


class LLMError(AutoBriefError):
    """The chat completion API could not be reached or returned an error."""

    kind = ErrorKind.LLM_UNAVAILABLE


class ProviderSyncError(AutoBriefError):
    """A provider API call failed while syncing an integration."""

    kind = ErrorKind.PROVIDER_FAILURE

    def __init__(self, provider: str, message: str, status_code: int = None):
        super().__init__(f"{provider}: {message}")
        self.provider = provider
        self.status_code = status_code
        # Set once the adapter has marked the integration disconnected
        self.disconnected = False


class IntegrationNotFound(AutoBriefError, LookupError):
    def __init__(self, integration_id: int):
        super().__init__(f"Integration with id {integration_id} not found")
        self.integration_id = integration_id
