"""Groq AI provider implementation."""

import logging
from typing import List, Optional

from groq import APIStatusError, AsyncGroq
from groq import RateLimitError as GroqRateLimitError
from groq.types.chat import ChatCompletion

from ...utils.errors import ProviderError, RateLimitError
from .base import BaseProvider


class GroqProvider(BaseProvider):
    """Groq AI implementation. Text generation only."""

    def __init__(self, api_key: str, default_model: Optional[str] = None):
        """Initialize the Groq provider.

        Args:
            api_key: Groq API key
            default_model: The default model to use for text generation. If None, uses llama-3.1-8b-instant.
        """
        super().__init__(default_model=default_model)
        self.client = AsyncGroq(api_key=api_key)
        self.model = default_model or "llama-3.1-8b-instant"
        self.logger = logging.getLogger(__name__)
        self.provider = "groq"

    async def generate_text(
        self,
        prompt: str,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
    ) -> str:
        """Generate text from the model."""
        try:
            response: ChatCompletion = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except GroqRateLimitError as e:
            retry_after = float(e.response.headers.get("retry-after", "60"))
            raise RateLimitError(self.provider, retry_after=retry_after) from e
        except APIStatusError as e:
            raise ProviderError(f"HTTP error: {str(e)}") from e
        except Exception as e:
            raise ProviderError(f"Groq error: {str(e)}") from e

        if not response.choices or not response.choices[0].message.content:
            raise ProviderError("Empty response from model")

        return response.choices[0].message.content

    async def get_embeddings(self, text: List[str], task_type: str = "retrieval_document") -> List[List[float]]:
        raise NotImplementedError("Groq does not support embeddings")

    def get_dimensions(self) -> int:
        raise NotImplementedError("Groq does not support embeddings")
