"""Typed views of the parts of mrbeanbot.json that this plugin writes.

The rest of the document stays an untyped JSON tree (see json_tree.py).
"""

from collections.abc import Sequence
from typing import Any
from typing import Final

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

from imbue.mng_mrbeanbot.primitives import ProviderName
from imbue.mng_mrbeanbot.primitives import TokenCount

OLLAMA_PROVIDER_NAME: Final[ProviderName] = ProviderName("ollama")
OLLAMA_LOCAL_API_KEY: Final[str] = "ollama-local"
OLLAMA_API_DIALECT: Final[str] = "openai-completions"
DEFAULT_OLLAMA_BASE_URL: Final[str] = "http://127.0.0.1:11434"
OPENAI_COMPATIBLE_PATH_SUFFIX: Final[str] = "/v1"

DEFAULT_CONTEXT_WINDOW: Final[int] = 128000
DEFAULT_MAX_TOKENS: Final[int] = 8192


class FrozenModel(BaseModel):
    """Base class for immutable pydantic models that prevent attribute mutation after construction."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
    )

    def to_json_object(self) -> dict[str, Any]:
        """Dump to JSON-compatible values, using the camelCase keys the agent expects."""
        return self.model_dump(mode="json", by_alias=True)


class ModelCost(FrozenModel):
    """Per-token prices. Local inference is not metered, so everything defaults to zero."""

    input: int = Field(default=0, ge=0)
    output: int = Field(default=0, ge=0)
    cache_read: int = Field(default=0, ge=0, alias="cacheRead")
    cache_write: int = Field(default=0, ge=0, alias="cacheWrite")


class ModelDescriptor(FrozenModel):
    """One entry of models.providers.<name>.models."""

    id: str = Field(description="Model identifier as known to the provider")
    name: str = Field(description="Display name; same as id for discovered models")
    reasoning: bool = False
    input: tuple[str, ...] = ("text",)
    cost: ModelCost = Field(default_factory=ModelCost)
    context_window: TokenCount = Field(default=TokenCount(DEFAULT_CONTEXT_WINDOW), alias="contextWindow")
    max_tokens: TokenCount = Field(default=TokenCount(DEFAULT_MAX_TOKENS), alias="maxTokens")

    @classmethod
    def for_local_model(cls, model_id: str) -> "ModelDescriptor":
        return cls(id=model_id, name=model_id)


class ProviderSection(FrozenModel):
    """The object stored at models.providers.<name>."""

    base_url: str = Field(alias="baseUrl")
    api_key: str = Field(alias="apiKey")
    api: str
    models: tuple[ModelDescriptor, ...] = ()


def build_ollama_provider_section(
    model_ids: Sequence[str],
    ollama_base_url: str = DEFAULT_OLLAMA_BASE_URL,
) -> ProviderSection:
    """Build the ollama provider section for the given models, keeping their order and any duplicates."""
    return ProviderSection(
        base_url=ollama_base_url.rstrip("/") + OPENAI_COMPATIBLE_PATH_SUFFIX,
        api_key=OLLAMA_LOCAL_API_KEY,
        api=OLLAMA_API_DIALECT,
        models=tuple(ModelDescriptor.for_local_model(model_id) for model_id in model_ids),
    )
