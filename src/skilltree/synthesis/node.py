import logging

from pydantic_ai import Agent

from skilltree.config.models import AppConfig, ModelConfig
from skilltree.store.cache import NodeCache
from skilltree.store.keys import normalize_topic
from skilltree.store.models import Node
from skilltree.synthesis.content import ContentSynthesizer
from skilltree.synthesis.exceptions import SynthesisError
from skilltree.synthesis.parsing import parse_node
from skilltree.synthesis.prompts import NODE_PROMPT, render_context
from skilltree.utils import get_model

logger = logging.getLogger(__name__)


class TreeSynthesizer:
    """Generates a complete node, with stub children, for an uncached topic."""

    def __init__(
        self,
        config: AppConfig,
        cache: NodeCache,
        content: ContentSynthesizer | None = None,
        model_config: ModelConfig | None = None,
    ):
        self._config = config
        self._cache = cache
        self._content = content or ContentSynthesizer(config, model_config)
        model = get_model(model_config or config.model, config)
        self._agent: Agent[None, str] = Agent(model=model, output_type=str)

    def child_limit(self, ancestors: list[str]) -> int:
        """Requested roots get a broader first level than interior nodes."""
        if ancestors:
            return self._config.tree.max_child_children
        return self._config.tree.max_root_children

    def build_prompt(self, name: str, ancestors: list[str]) -> str:
        return NODE_PROMPT.format(
            name=name,
            context=render_context(ancestors),
            max_children=self.child_limit(ancestors),
            practice_items=self._config.tree.practice_items,
        )

    async def generate(self, name: str, ancestors: list[str]) -> Node:
        """Synthesize a node for `name`.

        Content missing from the model's answer is backfilled, children that
        already have their own cache entry are dropped, and the remainder is
        capped at the configured breadth.

        Raises:
            SynthesisError: If the model call fails or returns unusable data.
        """
        logger.info(f"Synthesizing node '{name}'")
        prompt = self.build_prompt(name, ancestors)
        try:
            result = await self._agent.run(prompt)
        except Exception as e:
            raise SynthesisError(f"Model call failed for '{name}': {e}") from e

        generated = parse_node(result.output)
        node = Node(
            name=(generated.name or "").strip() or name,
            children=[Node.stub(child) for child in generated.children],
        )
        node.apply_content(generated.to_content())

        if not node.has_content:
            logger.debug(f"Backfilling content for '{node.name}'")
            node.apply_content(await self._content.generate(node.name, ancestors))

        node.children = await self._drop_cached(node.children)

        limit = self.child_limit(ancestors)
        if len(node.children) > limit:
            logger.debug(
                f"Truncating {len(node.children)} children of '{node.name}' to {limit}"
            )
            node.children = node.children[:limit]
        return node

    async def _drop_cached(self, children: list[Node]) -> list[Node]:
        kept = []
        for child in children:
            if await self._cache.exists(normalize_topic(child.name)):
                logger.debug(f"Dropping '{child.name}': already cached")
                continue
            kept.append(child)
        return kept
