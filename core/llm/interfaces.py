"""
LLM Provider Interface - Abstract base for the scoring oracle.

The match scorer only needs free-text completions; any chat-completion
backend (OpenAI, Azure OpenAI, a local OpenAI-compatible server) fits.
"""
from abc import ABC, abstractmethod
from typing import Optional


class LLMProvider(ABC):
    """
    Abstract Interface for AI Service Providers (OpenAI, Azure OpenAI, etc.).
    """

    model_name: str = "unknown"

    @abstractmethod
    def generate_response(
        self,
        prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        system_prompt: Optional[str] = None
    ) -> str:
        """
        Send a single prompt and return the raw text of the completion.
        """
        pass

    @abstractmethod
    def test_connection(self) -> bool:
        """
        Return True when the provider answers a trivial prompt.
        """
        pass
