"""
Provider configuration model.

Immutable model/base URL/API key triple for an OpenAI-compatible endpoint.

Dependencies: pydantic
System role: Provider configuration value object
"""

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator


class ProviderConfig(BaseModel):
    """Endpoint configuration for an embedding or chat model."""

    model_config = ConfigDict(frozen=True)

    model: str = Field(description="Model name")
    base_url: str = Field(description="OpenAI-compatible base URL")
    api_key: SecretStr = Field(description="API key")

    @field_validator("model", "base_url")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("api_key")
    @classmethod
    def _key_not_blank(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value().strip():
            raise ValueError("must not be empty")
        return value
