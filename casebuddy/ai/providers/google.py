"""Google AI provider implementation."""

import asyncio
import logging
from functools import partial
from typing import List, Optional

import google.generativeai as genai
from google.api_core import exceptions

from ...config import settings
from ...utils.errors import ProviderError, RateLimitError
from .base import BaseProvider

# Approximate character budget of the embedding model input
MAX_EMBEDDING_CHARS = 3000

SAFETY_SETTINGS = {
    "HARM_CATEGORY_HARASSMENT": "BLOCK_MEDIUM_AND_ABOVE",
    "HARM_CATEGORY_HATE_SPEECH": "BLOCK_MEDIUM_AND_ABOVE",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT": "BLOCK_MEDIUM_AND_ABOVE",
    "HARM_CATEGORY_DANGEROUS_CONTENT": "BLOCK_MEDIUM_AND_ABOVE",
}


class GoogleAIProvider(BaseProvider):
    """Provider for Google's Generative AI API (including Gemini)."""

    def __init__(self, default_model: Optional[str] = None, embedding_model: Optional[str] = None):
        """Initialize the Google AI provider.

        Args:
            default_model: The default model to use for text generation. If None, uses the configured default.
            embedding_model: The embedding model. If None, uses the configured default.
        """
        super().__init__(default_model=default_model)
        genai.configure(api_key=settings.ai.google_api_key.get_secret_value())
        self._dimensions = settings.ai.embedding_dimensions
        self._default_model = default_model or settings.ai.default_model
        self.embedding_model = embedding_model or settings.ai.embedding_model
        self.logger = logging.getLogger(__name__)
        self.provider = "google"

    async def generate_text(
        self,
        prompt: str,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
    ) -> str:
        """Generate text from the model."""
        generate_config = genai.types.GenerationConfig(temperature=temperature, max_output_tokens=max_tokens)
        try:
            model_instance = genai.GenerativeModel(
                model_name=self._default_model,
                generation_config=generate_config,
                safety_settings=SAFETY_SETTINGS,
            )
            response = await model_instance.generate_content_async(prompt)
        except exceptions.ResourceExhausted as e:
            # Google's API returns 429 as ResourceExhausted
            # Default to 60s retry if no retry info provided
            raise RateLimitError(self.provider, retry_after=60.0) from e
        except Exception as e:
            raise ProviderError(f"Google error: {str(e)}") from e

        # .text raises ValueError when the candidate was blocked or carries no parts
        try:
            text = response.text
        except ValueError as e:
            raise ProviderError(f"Unusable response from model: {str(e)}") from e

        if not text or not text.strip():
            raise ProviderError("Empty response from model")

        return text

    async def get_embeddings(self, text: List[str], task_type: str = "retrieval_document") -> List[List[float]]:
        """Get embeddings using Google's embedding model.

        Args:
            text: Texts to embed
            task_type: ``retrieval_document`` for indexed cases, ``retrieval_query`` for lookups

        Returns:
            List of embeddings vectors
        """
        self.logger.debug(f"Getting embeddings for {len(text)} texts")
        loop = asyncio.get_running_loop()

        embeddings = []
        for idx, item in enumerate(text):
            try:
                result = await loop.run_in_executor(
                    None,
                    partial(
                        genai.embed_content,
                        model=self.embedding_model,
                        content=self._clean_text(item),
                        task_type=task_type,
                    ),
                )
            except exceptions.ResourceExhausted as e:
                raise RateLimitError(self.provider, retry_after=60.0) from e
            except Exception as e:
                raise ProviderError(f"Google embedding error: {str(e)}") from e

            if not result or "embedding" not in result:
                raise ProviderError(f"No embedding returned from model for text {idx + 1}")

            embeddings.append(list(result["embedding"]))

        return embeddings

    def get_dimensions(self) -> int:
        """Get the dimensionality of the embeddings vectors.

        Returns:
            Number of dimensions (768 for text-embedding-004)
        """
        return self._dimensions

    def _clean_text(self, text: str) -> str:
        """Clean text before embedding.

        Args:
            text: Text to clean

        Returns:
            Cleaned text
        """
        text = " ".join(text.split())

        if len(text) > MAX_EMBEDDING_CHARS:
            text = text[:MAX_EMBEDDING_CHARS]

        return text
