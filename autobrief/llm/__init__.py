from autobrief.llm.groq_client import GroqClient, LLMResult

__all__ = [
    "GroqClient",
    "LLMResult",
]
