"""
Groq chat completion client.

Sends single-turn conversations to Groq's OpenAI-compatible
/chat/completions endpoint. Every call is a fresh request: no caching, no
retries.
"""
from dataclasses import dataclass
from typing import Dict, List, Optional

import requests

from autobrief.config import Settings
from autobrief.errors import ErrorKind, LLMError


@dataclass
class LLMResult:
    """Outcome of one completion: text on success, error_kind on failure."""

    text: str = ""
    error_kind: Optional[ErrorKind] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error_kind is None

    @classmethod
    def failure(cls, kind: ErrorKind, error: str) -> "LLMResult":
        return cls(text="", error_kind=kind, error=error)


class GroqClient:
    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        self.api_key = settings.groq_api_key
        self.api_url = settings.groq_api_url
        self.model = settings.groq_model
        self.timeout = settings.http_timeout
        self.session = session or requests.Session()

    def chat_completion(
        self,
        prompt: str,
        *,
        temperature: float = 0.7,
        max_tokens: int = 1000,
        system: Optional[str] = None,
    ) -> str:
        """
        Run a chat completion for a single user prompt.

        Returns:
            The first choice's message content ("" when the API returned none).

        Raises:
            LLMError: missing API key, transport failure, non-2xx status or an
            unreadable response body.
        """
        if not self.api_key:
            raise LLMError("GROQ_API_KEY not configured")

        messages: List[Dict[str, str]] = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        try:
            response = self.session.post(
                self.api_url,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json={
                    "model": self.model,
                    "messages": messages,
                    "temperature": temperature,
                    "max_tokens": max_tokens,
                },
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise LLMError(f"Groq request failed: {e}") from e

        if not response.ok:
            raise LLMError(f"Groq API error: {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise LLMError(f"Groq API returned invalid JSON: {e}") from e

        choices = data.get("choices") or []
        if not choices:
            return ""
        return (choices[0].get("message") or {}).get("content") or ""
