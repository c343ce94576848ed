"""
Prompt registry.

In-process map of named chat templates, optionally mirrored to Langfuse as
versioned prompts.

Dependencies: langfuse, langchain_core, ragdesk.configs
System role: Prompt template management and version tracking
"""

import logging
from typing import Any

from langchain_core.messages import BaseMessage
from langfuse import Langfuse

from ragdesk.configs.observability import ObservabilitySettings
from ragdesk.core.exceptions import NotFoundError, ValidationError
from ragdesk.observability.prompt_registry.converter import convert_chat_template
from ragdesk.observability.prompt_registry.defaults import DEFAULT_PROMPTS
from ragdesk.observability.prompt_registry.models import ModelConfig, PromptSpec

logger = logging.getLogger(__name__)


class PromptRegistry:
    """
    Named prompt templates with optional Langfuse mirroring.

    The local map is the source of truth. When Langfuse tracing is enabled
    and keys are configured, every added prompt is also pushed to Langfuse
    as a new chat prompt version.

    Example:
        >>> registry = PromptRegistry()
        >>> registry.render("general-chat", {"chat_history": "", "question": "hi"})
    """

    def __init__(
        self,
        settings: ObservabilitySettings | None = None,
        model_config: ModelConfig | None = None,
        client: Langfuse | None = None,
        labels: list[str] | None = None,
    ) -> None:
        """
        Initialize the registry and seed the default prompts.

        Args:
            settings: Langfuse settings (mirroring off when None)
            model_config: Model configuration stored with mirrored prompts
            client: Pre-built Langfuse client, overrides settings
            labels: Langfuse labels for mirrored versions
        """
        self._prompts: dict[str, PromptSpec] = {}
        self._model_config = model_config
        self._labels = labels or ["development"]
        self._client = client if client is not None else self._build_client(settings)

        for spec in DEFAULT_PROMPTS:
            self.add_prompt(spec)
        logger.info("Initialized %d default prompt templates", len(self._prompts))

    @staticmethod
    def _build_client(settings: ObservabilitySettings | None) -> Langfuse | None:
        if settings is None or not settings.enable_tracing:
            logger.info("Langfuse tracing disabled, prompt mirroring inactive")
            return None
        if not settings.public_key or not settings.secret_key:
            logger.warning("Langfuse keys not configured, prompt mirroring inactive")
            return None
        logger.info("Prompt mirroring enabled: host=%s", settings.host)
        return Langfuse(
            public_key=settings.public_key,
            secret_key=settings.secret_key,
            host=settings.host,
        )

    @property
    def is_mirrored(self) -> bool:
        """Whether prompts are pushed to Langfuse."""
        return self._client is not None

    def add_prompt(self, spec: PromptSpec) -> None:
        """
        Register or replace a named prompt.

        Args:
            spec: Prompt definition
        """
        self._prompts[spec.name] = spec
        logger.info("Prompt template '%s' added", spec.name)
        self._mirror(spec)

    def _mirror(self, spec: PromptSpec) -> None:
        if self._client is None:
            return
        config = self._model_config.to_langfuse_config() if self._model_config else {}
        try:
            prompt = self._client.create_prompt(
                name=spec.name,
                type="chat",
                prompt=convert_chat_template(spec.template),
                config=config,
                labels=self._labels,
            )
            logger.info("Mirrored prompt to Langfuse: name=%s version=%s", spec.name, prompt.version)
        except Exception as e:
            # Mirroring is best-effort; the local registration stands
            logger.warning("Langfuse prompt mirror failed: name=%s error=%s", spec.name, e)

    def get_prompt(self, name: str) -> PromptSpec:
        """
        Look up a prompt by name.

        Raises:
            NotFoundError: If no prompt has that name
        """
        spec = self._prompts.get(name)
        if spec is None:
            raise NotFoundError(f"Prompt template '{name}' not found", resource=name)
        return spec

    def available_prompts(self) -> list[str]:
        """Names of all registered prompts, in registration order."""
        return list(self._prompts)

    def render(self, name: str, variables: dict[str, Any]) -> list[BaseMessage]:
        """
        Render a named prompt into chat messages.

        Args:
            name: Prompt identifier
            variables: Values for every template variable

        Returns:
            list[BaseMessage]: Messages ready for the chat model

        Raises:
            NotFoundError: If the prompt is unknown
            ValidationError: If required variables are missing
        """
        spec = self.get_prompt(name)
        missing = [var for var in spec.input_variables if var not in variables]
        if missing:
            raise ValidationError(
                f"Missing required variables for prompt '{name}': {', '.join(missing)}",
                field="variables",
                details={"missing": missing},
            )
        return spec.template.format_messages(**variables)
