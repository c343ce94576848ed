"""
Chat model gateway over an OpenAI-compatible /chat/completions endpoint.

Dependencies: langchain_openai, langchain_core
System role: Answer generation
"""

import logging

from langchain_core.messages import BaseMessage
from langchain_core.output_parsers import StrOutputParser
from langchain_core.runnables import Runnable
from langchain_openai import ChatOpenAI

from ragdesk.core.exceptions import ExternalServiceError
from ragdesk.models.provider import ProviderConfig

logger = logging.getLogger(__name__)


class LLMGateway:
    """
    Invoke the configured chat model and return plain text.

    Timeout and retry count are applied by the HTTP client only.
    """

    def __init__(
        self,
        config: ProviderConfig,
        temperature: float = 0.1,
        max_tokens: int | None = 2000,
        timeout: float = 30.0,
        max_retries: int = 2,
        model: Runnable | None = None,
    ) -> None:
        """
        Initialize gateway for one provider configuration.

        Args:
            config: Model, base URL and API key
            temperature: Sampling temperature
            max_tokens: Answer length limit
            timeout: Per-request timeout in seconds
            max_retries: Transport-level retries
            model: Pre-built chat model runnable (tests)
        """
        self.config = config
        chat_model = model or ChatOpenAI(
            model=config.model,
            base_url=config.base_url,
            api_key=config.api_key,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
            max_retries=max_retries,
        )
        self._chain = chat_model | StrOutputParser()

    @property
    def model(self) -> str:
        return self.config.model

    async def invoke(self, messages: list[BaseMessage] | str) -> str:
        """
        Generate a completion.

        Args:
            messages: Chat messages or a single prompt string

        Returns:
            str: Model answer text

        Raises:
            ExternalServiceError: When the model call fails
        """
        try:
            answer = await self._chain.ainvoke(messages)
        except Exception as e:
            logger.error(f"{__name__}:invoke - FAILED: {type(e).__name__}: {e}")
            raise ExternalServiceError(
                f"LLM invocation failed: {e}",
                service="llm",
                details={"model": self.model},
            ) from e
        logger.info(f"{__name__}:invoke - model={self.model} answer_len={len(answer)}")
        return answer
