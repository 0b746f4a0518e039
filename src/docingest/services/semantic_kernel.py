"""Semantic Kernel adapters for the completion and embedding protocols.

Wraps an SK chat completion service and an SK text embedding service so they
can be handed to the EnrichmentCoordinator. SK is imported lazily inside the
calls so that the core pipeline imports without touching the connectors.
"""

import logging
from typing import TYPE_CHECKING, Any

from docingest.lib.errors import UpstreamServiceError
from docingest.services.base import ChatMessage

if TYPE_CHECKING:
    from semantic_kernel.connectors.ai.chat_completion_client_base import (
        ChatCompletionClientBase,
    )
    from semantic_kernel.connectors.ai.embedding_generator_base import (
        EmbeddingGeneratorBase,
    )
    from semantic_kernel.connectors.ai.prompt_execution_settings import (
        PromptExecutionSettings,
    )

logger = logging.getLogger(__name__)


class SemanticKernelCompletionClient:
    """CompletionClient backed by a Semantic Kernel chat completion service.

    Example:
        >>> from semantic_kernel.connectors.ai.open_ai import AzureChatCompletion
        >>> client = SemanticKernelCompletionClient(AzureChatCompletion(...))
        >>> summary = await client.complete(messages)
    """

    def __init__(
        self,
        chat_service: "ChatCompletionClientBase",
        execution_settings: "PromptExecutionSettings | None" = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            chat_service: Semantic Kernel chat completion service instance.
            execution_settings: Optional prompt execution settings. Service
                defaults are used when not provided.
        """
        self._chat_service = chat_service
        self._execution_settings = execution_settings

    async def complete(self, messages: list[ChatMessage]) -> str:
        """Send ``messages`` and return the first reply's text.

        Raises:
            UpstreamServiceError: If the completion call fails.
        """
        # Import here to avoid loading connectors at package import and allow mocking
        from semantic_kernel.connectors.ai.open_ai import (
            OpenAIChatPromptExecutionSettings,
        )
        from semantic_kernel.contents import ChatHistory

        chat_history = ChatHistory()
        for message in messages:
            if message.role == "system":
                chat_history.add_system_message(message.content)
            elif message.role == "assistant":
                chat_history.add_assistant_message(message.content)
            else:
                chat_history.add_user_message(message.content)

        settings = self._execution_settings or OpenAIChatPromptExecutionSettings()

        try:
            result = await self._chat_service.get_chat_message_contents(
                chat_history=chat_history,
                settings=settings,
            )
        except Exception as e:
            raise UpstreamServiceError(
                "completion", "Chat completion request failed", e
            ) from e

        if result and len(result) > 0:
            content = result[0].content
            return str(content).strip() if content else ""
        return ""


class SemanticKernelEmbeddingClient:
    """EmbeddingClient backed by a Semantic Kernel text embedding service."""

    def __init__(self, embedding_service: "EmbeddingGeneratorBase") -> None:
        self._embedding_service = embedding_service

    async def embed(self, text: str) -> list[float]:
        """Return the embedding vector for ``text``.

        Raises:
            UpstreamServiceError: If the embedding call fails or returns nothing.
        """
        try:
            embeddings: Any = await self._embedding_service.generate_embeddings([text])
        except Exception as e:
            raise UpstreamServiceError(
                "embedding", "Embedding request failed", e
            ) from e

        if embeddings is None or len(embeddings) == 0:
            raise UpstreamServiceError("embedding", "Embedding service returned no vector")

        return [float(value) for value in embeddings[0]]
