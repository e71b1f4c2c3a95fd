import asyncio
import logging
import weakref
from collections.abc import Sequence

from skilltree.config.models import AppConfig
from skilltree.store.cache import NodeCache, get_cache
from skilltree.store.keys import normalize_topic
from skilltree.store.models import Node
from skilltree.synthesis.content import ContentSynthesizer
from skilltree.synthesis.exceptions import SynthesisError
from skilltree.synthesis.node import TreeSynthesizer

logger = logging.getLogger(__name__)


class TreeBuilder:
    """Builds skill trees on top of the node cache.

    For every node it either serves the cached entry (backfilling missing
    content and hydrating stub children when the request reaches deeper than
    what was stored) or synthesizes a fresh node. Synthesis and backfill of a
    key are single-flight: concurrent requests for the same topic wait for the
    first one and reuse what it stored. Hold one builder per process so that
    guarantee spans requests.
    """

    def __init__(
        self,
        config: AppConfig,
        cache: NodeCache | None = None,
        content: ContentSynthesizer | None = None,
        synthesizer: TreeSynthesizer | None = None,
    ):
        self._config = config
        self._cache = cache if cache is not None else get_cache(config)
        self._content = content or ContentSynthesizer(config)
        self._synthesizer = synthesizer or TreeSynthesizer(
            config, self._cache, self._content
        )
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    async def build_tree(
        self,
        topic: str,
        ancestors: Sequence[str] = (),
        max_depth: int | None = None,
    ) -> Node:
        """Build the tree for an inbound request.

        Args:
            topic: Topic to build; a new subject or a node being expanded
            ancestors: Names from the root down to the topic's parent
            max_depth: Levels of children to hydrate; defaults to the
                configured ``tree.max_depth``

        Raises:
            ValueError: If the topic is empty or max_depth is negative.
        """
        if max_depth is None:
            max_depth = self._config.tree.max_depth
        if max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {max_depth}")
        if not topic or not topic.strip():
            raise ValueError("Topic must be a non-empty string")
        return await self.build(topic.strip(), ancestors, 0, max_depth)

    async def build(
        self,
        topic: str,
        ancestors: Sequence[str],
        depth: int,
        max_depth: int,
    ) -> Node:
        """Return the node for `topic` with children hydrated to `max_depth`.

        A synthesis failure is returned as a degraded node instead of being
        raised, so one bad branch never aborts its siblings or parent. The
        degraded node is not cached.
        """
        ancestors = list(ancestors)
        key = normalize_topic(topic)

        node = None
        if not await self._cache.exists(key):
            logger.debug(f"Cache miss for '{topic}' ({key})")
            try:
                node = await self._synthesize(
                    key, topic, ancestors, collapse=depth >= max_depth
                )
            except SynthesisError as e:
                logger.error(f"Failed to build '{topic}': {e}")
                return Node.degraded(topic, str(e))
        if node is None:
            logger.debug(f"Cache hit for '{topic}' ({key})")
            node = await self._cache.load(key)
            if not node.has_content:
                node = await self._backfill(key, ancestors)

        if depth < max_depth and node.children and node.children[0].is_stub:
            node.children = await self._build_children(
                node, ancestors, depth, max_depth
            )
            await self._cache.store(key, node)
        else:
            node.collapse_children()
        return node

    async def _synthesize(
        self, key: str, topic: str, ancestors: list[str], collapse: bool
    ) -> Node | None:
        """Synthesize and store a new node, or return None if a concurrent
        request stored the key while we waited for the lock."""
        async with self._lock(key):
            if await self._cache.exists(key):
                logger.debug(f"Reusing '{topic}' stored by a concurrent request")
                return None

            node = await self._synthesizer.generate(topic, ancestors)
            if collapse:
                node.collapse_children()
            await self._cache.store(key, node)
            return node

    async def _backfill(self, key: str, ancestors: list[str]) -> Node:
        async with self._lock(key):
            node = await self._cache.load(key)
            if node.has_content:
                return node

            logger.info(f"Backfilling content for cached node '{node.name}'")
            content = await self._content.generate(node.name, ancestors)
            if not content.is_empty:
                node.apply_content(content)
                await self._cache.store(key, node)
            return node

    async def _build_children(
        self,
        node: Node,
        ancestors: list[str],
        depth: int,
        max_depth: int,
    ) -> list[Node]:
        child_ancestors = [*ancestors, node.name]
        names = [child.name for child in node.children]
        batch_size = self._config.tree.max_concurrency

        children: list[Node] = []
        for start in range(0, len(names), batch_size):
            batch = names[start : start + batch_size]
            if len(batch) == 1:
                built = [
                    await self.build(batch[0], child_ancestors, depth + 1, max_depth)
                ]
            else:
                built = await asyncio.gather(
                    *(
                        self.build(name, child_ancestors, depth + 1, max_depth)
                        for name in batch
                    )
                )
            for child in built:
                child.collapsed = True
                children.append(child)
        return children

    def _lock(self, key: str) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock
