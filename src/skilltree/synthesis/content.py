import logging

from pydantic_ai import Agent

from skilltree.config.models import AppConfig, ModelConfig
from skilltree.store.models import NodeContent
from skilltree.synthesis.parsing import parse_content
from skilltree.synthesis.prompts import CONTENT_PROMPT, render_context
from skilltree.utils import get_model

logger = logging.getLogger(__name__)


class ContentSynthesizer:
    """Generates practice items and references for a single named topic."""

    def __init__(
        self,
        config: AppConfig,
        model_config: ModelConfig | None = None,
    ):
        self._config = config
        model = get_model(model_config or config.model, config)
        self._agent: Agent[None, str] = Agent(model=model, output_type=str)

    def build_prompt(self, name: str, ancestors: list[str]) -> str:
        return CONTENT_PROMPT.format(
            name=name,
            context=render_context(ancestors),
            practice_items=self._config.tree.practice_items,
        )

    async def generate(self, name: str, ancestors: list[str]) -> NodeContent:
        """Ask the model for content; any failure yields empty content.

        Returns:
            The generated content, or an empty NodeContent when the model
            call fails or its answer cannot be parsed.
        """
        prompt = self.build_prompt(name, ancestors)
        try:
            result = await self._agent.run(prompt)
            return parse_content(result.output)
        except Exception as e:
            logger.warning(f"Content generation failed for '{name}': {e}")
            return NodeContent()
