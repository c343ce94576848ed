"""
Pydantic models for the prompt registry.

Named prompt templates and the model configuration tracked alongside them.

Dependencies: pydantic, langchain_core.prompts
System role: Prompt definitions and prompt-model configuration
"""

from typing import Any

from langchain_core.prompts import ChatPromptTemplate
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ModelConfig(BaseModel):
    """
    LLM model configuration tracked with prompts.

    Stored with each prompt version in Langfuse for reproducibility.
    """

    model: str = Field(description="LLM model identifier")
    temperature: float | None = Field(default=None, ge=0.0, le=2.0, description="Sampling temperature")
    max_tokens: int | None = Field(default=None, gt=0, description="Maximum tokens in response")
    extra: dict[str, Any] | None = Field(default=None, description="Additional model-specific parameters")

    def to_langfuse_config(self) -> dict[str, Any]:
        """
        Convert to Langfuse config dictionary.

        Returns:
            dict: Configuration dict for Langfuse prompt creation
        """
        config: dict[str, Any] = {"model": self.model}
        if self.temperature is not None:
            config["temperature"] = self.temperature
        if self.max_tokens is not None:
            config["max_tokens"] = self.max_tokens
        if self.extra:
            config.update(self.extra)
        return config


class PromptSpec(BaseModel):
    """Named chat prompt template."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    name: str = Field(description="Unique prompt identifier")
    description: str = Field(default="", description="What the prompt is for")
    template: ChatPromptTemplate = Field(description="LangChain chat template")

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("prompt name must not be empty")
        return value

    @property
    def input_variables(self) -> list[str]:
        """Variables the template needs to render."""
        return sorted(self.template.input_variables)
