import os
from pathlib import Path

from pydantic import BaseModel, Field

from skilltree.utils import get_default_data_dir


class ModelConfig(BaseModel):
    """Configuration for the generative model.

    Attributes:
        provider: Model provider (gemini, ollama, openai, anthropic, etc.)
        name: Model name/identifier
        base_url: Optional base URL for OpenAI-compatible servers or Ollama
        temperature: Sampling temperature (0.0 to 1.0+)
        max_tokens: Maximum tokens to generate
    """

    provider: str = "gemini"
    name: str = "gemini-2.5-flash-lite"
    base_url: str | None = None

    temperature: float | None = None
    max_tokens: int | None = None


class StorageConfig(BaseModel):
    data_dir: Path = Field(default_factory=get_default_data_dir)
    # Defaults to <data_dir>/nodes when unset.
    cache_dir: Path | None = None

    @property
    def node_dir(self) -> Path:
        return self.cache_dir or self.data_dir / "nodes"


class TreeConfig(BaseModel):
    """Shape of generated skill trees.

    Attributes:
        max_depth: Expansion depth used when a caller does not pass one
        max_root_children: Children kept for a node requested without ancestors
        max_child_children: Children kept for an interior node
        practice_items: Practice items requested per node
        max_concurrency: Children hydrated at once; 1 keeps fan-out sequential
    """

    max_depth: int = Field(default=1, ge=0)
    max_root_children: int = Field(default=6, ge=0)
    max_child_children: int = Field(default=4, ge=0)
    practice_items: int = Field(default=3, ge=1)
    max_concurrency: int = Field(default=1, ge=1)


class OllamaConfig(BaseModel):
    base_url: str = Field(
        default_factory=lambda: os.environ.get(
            "OLLAMA_BASE_URL", "http://localhost:11434"
        )
    )


class ProvidersConfig(BaseModel):
    ollama: OllamaConfig = Field(default_factory=OllamaConfig)


class AppConfig(BaseModel):
    environment: str = "production"
    storage: StorageConfig = Field(default_factory=StorageConfig)
    model: ModelConfig = Field(default_factory=ModelConfig)
    tree: TreeConfig = Field(default_factory=TreeConfig)
    providers: ProvidersConfig = Field(default_factory=ProvidersConfig)
