import os
import sys
from pathlib import Path
from typing import Any


def apply_common_settings(
    settings: Any | None,
    settings_class: type[Any],
    model_config: Any,
) -> Any | None:
    """Apply common settings (temperature, max_tokens) to model settings.

    Args:
        settings: Existing settings instance or None
        settings_class: Settings class to instantiate if needed
        model_config: ModelConfig with temperature and max_tokens

    Returns:
        Updated settings instance or None if no settings to apply
    """
    if model_config.temperature is None and model_config.max_tokens is None:
        return settings

    if settings is None:
        settings_dict = settings_class()
    else:
        settings_dict = settings

    if model_config.temperature is not None:
        settings_dict["temperature"] = model_config.temperature

    if model_config.max_tokens is not None:
        settings_dict["max_tokens"] = model_config.max_tokens

    return settings_dict


def get_model(
    model_config: Any,
    app_config: Any | None = None,
) -> Any:
    """
    Get a model instance for the specified configuration.

    Args:
        model_config: ModelConfig with provider, model, and settings
        app_config: AppConfig for provider base URLs (defaults to global Config)

    Returns:
        A configured model instance
    """
    if app_config is None:
        from skilltree.config import Config

        app_config = Config

    provider = model_config.provider
    model = model_config.name

    if provider == "gemini":
        from pydantic_ai.models.google import GoogleModel, GoogleModelSettings
        from pydantic_ai.providers.google import GoogleProvider

        gemini_settings = apply_common_settings(
            None, GoogleModelSettings, model_config
        )
        # GEMINI_API_KEY is accepted alongside the GOOGLE_API_KEY pydantic-ai reads
        api_key = os.environ.get("GOOGLE_API_KEY") or os.environ.get("GEMINI_API_KEY")
        return GoogleModel(
            model_name=model,
            provider=GoogleProvider(api_key=api_key) if api_key else "google-gla",
            settings=gemini_settings,
        )

    elif provider == "ollama":
        from pydantic_ai.models.openai import OpenAIChatModel, OpenAIChatModelSettings
        from pydantic_ai.providers.ollama import OllamaProvider

        base_url = model_config.base_url or app_config.providers.ollama.base_url
        ollama_settings = apply_common_settings(
            None, OpenAIChatModelSettings, model_config
        )
        return OpenAIChatModel(
            model_name=model,
            provider=OllamaProvider(base_url=f"{base_url}/v1"),
            settings=ollama_settings,
        )

    elif provider == "openai":
        from pydantic_ai.models.openai import OpenAIChatModel, OpenAIChatModelSettings
        from pydantic_ai.providers.openai import OpenAIProvider

        openai_settings = apply_common_settings(
            None, OpenAIChatModelSettings, model_config
        )
        if model_config.base_url:
            # OpenAI-compatible servers (vLLM, LM Studio, ...)
            return OpenAIChatModel(
                model_name=model,
                provider=OpenAIProvider(
                    base_url=f"{model_config.base_url}/v1", api_key="none"
                ),
                settings=openai_settings,
            )
        return OpenAIChatModel(model_name=model, settings=openai_settings)

    elif provider == "anthropic":
        from pydantic_ai.models.anthropic import AnthropicModel, AnthropicModelSettings

        anthropic_settings = apply_common_settings(
            None, AnthropicModelSettings, model_config
        )
        return AnthropicModel(model_name=model, settings=anthropic_settings)

    else:
        # For any other provider, use string format and let Pydantic AI handle it
        return f"{provider}:{model}"


def get_default_data_dir() -> Path:
    """Get the user data directory for the current system platform.

    Linux: ~/.local/share/skilltree
    macOS: ~/Library/Application Support/skilltree
    Windows: C:/Users/<USER>/AppData/Roaming/skilltree

    Returns:
        User Data Path.
    """
    home = Path.home()

    system_paths = {
        "win32": home / "AppData/Roaming/skilltree",
        "linux": home / ".local/share/skilltree",
        "darwin": home / "Library/Application Support/skilltree",
    }

    return system_paths.get(sys.platform, home / ".skilltree")
