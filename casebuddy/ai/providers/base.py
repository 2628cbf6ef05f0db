"""Base classes for AI providers."""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional


class BaseProvider(ABC):
    """Common interface of the text generation and embedding backends."""

    def __init__(self, default_model: Optional[str] = None):
        """Initialize the provider.

        Args:
            default_model: Text generation model, the provider's own default if None
        """
        self.logger = logging.getLogger(__name__)
        self._default_model = default_model
        self.provider = "base"

    @property
    def default_model(self) -> Optional[str]:
        return self._default_model

    @abstractmethod
    async def generate_text(
        self,
        prompt: str,
        temperature: float = 1.0,
        max_tokens: Optional[int] = None,
    ) -> str:
        """Complete a prompt.

        Raises:
            ProviderError: If the call fails or the model returns no usable text
            RateLimitError: If the provider throttles the request
        """

    @abstractmethod
    async def get_embeddings(self, text: List[str], task_type: str = "retrieval_document") -> List[List[float]]:
        """Embed each text, returning vectors in input order.

        ``task_type`` tells providers that distinguish them whether the texts
        are stored documents or search queries.

        Raises:
            ProviderError: If any text cannot be embedded
            RateLimitError: If the provider throttles the request
        """

    @abstractmethod
    def get_dimensions(self) -> int:
        """Length of the vectors returned by ``get_embeddings``."""
