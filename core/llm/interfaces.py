"""
LLM Provider Interface - Abstract base for remote scoring backends.

The matching engine needs exactly one capability from a backend: send a
prompt, get text back, within a bounded time.
"""
from abc import ABC, abstractmethod
from typing import Optional


class LLMProvider(ABC):
    """
    Abstract Interface for AI Service Providers (OpenAI, Ollama, Anthropic, etc.).
    """

    @abstractmethod
    def complete(self, prompt: str, system_prompt: Optional[str] = None) -> str:
        """
        Send a prompt to the model and return its raw text response.

        Implementations must enforce a timeout and raise on failure rather
        than block indefinitely.

        Args:
            prompt: User prompt text
            system_prompt: Optional system instruction
        """
        pass
