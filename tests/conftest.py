import asyncio
import json
import os
import re
import tempfile
from pathlib import Path

# Keep the user's own skilltree.yaml out of the test run: point the loader at
# an empty config file BEFORE any skilltree imports.
_test_config_dir = tempfile.mkdtemp()
_test_config_path = Path(_test_config_dir) / "test-defaults.yaml"
_test_config_path.write_text("{}")
os.environ["SKILLTREE_CONFIG_PATH"] = str(_test_config_path)

import pytest  # noqa: E402
import yaml  # noqa: E402
from pydantic_ai.messages import (  # noqa: E402
    ModelMessage,
    ModelRequest,
    ModelResponse,
    TextPart,
    UserPromptPart,
)
from pydantic_ai.models.function import AgentInfo, FunctionModel  # noqa: E402

from skilltree.config import AppConfig  # noqa: E402
from skilltree.config.models import StorageConfig  # noqa: E402
from skilltree.store.cache import MemoryNodeCache  # noqa: E402

NODE_TOPIC = re.compile(r'The learner wants to study: "(.+)"')
CONTENT_TOPIC = re.compile(r'^Topic: "(.+)"$', re.MULTILINE)


def make_node_reply(name: str, children: list[str], content: bool = True) -> dict:
    reply: dict = {"name": name, "children": [{"name": c} for c in children]}
    if content:
        reply.update(make_content_reply(name))
    return reply


def make_content_reply(name: str) -> dict:
    return {
        "practiceItems": [
            {"q": f"{name} question {i}", "s": f"{name} answer {i}"} for i in range(3)
        ],
        "videoTutorials": [
            {"title": f"{name} intro", "url": "https://example.com/intro"},
            {"title": f"{name} deep dive", "url": "https://example.com/deep"},
        ],
    }


class FakeLLM:
    """Scripted stand-in for the generative model.

    Replies are looked up by topic; anything unscripted gets a node with two
    children (or a full content block). A scripted Exception is raised from
    the model call and a scripted str is returned verbatim.
    """

    node_reply = staticmethod(make_node_reply)
    content_reply = staticmethod(make_content_reply)

    def __init__(self):
        self.nodes: dict[str, object] = {}
        self.contents: dict[str, object] = {}
        self.delays: dict[str, float] = {}
        self.node_calls: list[str] = []
        self.content_calls: list[str] = []
        self.prompts: list[str] = []

    @property
    def calls(self) -> int:
        return len(self.node_calls) + len(self.content_calls)

    async def respond(
        self, messages: list[ModelMessage], info: AgentInfo
    ) -> ModelResponse:
        prompt = _prompt_text(messages)
        self.prompts.append(prompt)

        match = NODE_TOPIC.search(prompt)
        if match:
            topic = match.group(1)
            self.node_calls.append(topic)
            reply = self.nodes.get(
                topic, make_node_reply(topic, [f"{topic} I", f"{topic} II"])
            )
        else:
            match = CONTENT_TOPIC.search(prompt)
            assert match, f"Unrecognised prompt: {prompt[:200]}"
            topic = match.group(1)
            self.content_calls.append(topic)
            reply = self.contents.get(topic, make_content_reply(topic))

        await asyncio.sleep(self.delays.get(topic, 0))
        if isinstance(reply, Exception):
            raise reply
        if not isinstance(reply, str):
            reply = json.dumps(reply)
        return ModelResponse(parts=[TextPart(content=reply)])


def _prompt_text(messages: list[ModelMessage]) -> str:
    for message in reversed(messages):
        if isinstance(message, ModelRequest):
            for part in message.parts:
                if isinstance(part, UserPromptPart) and isinstance(part.content, str):
                    return part.content
    return ""


@pytest.fixture
def fake_llm(monkeypatch) -> FakeLLM:
    """Route every synthesizer's model through a FakeLLM."""
    llm = FakeLLM()

    def model_factory(model_config, app_config=None):
        return FunctionModel(llm.respond)

    monkeypatch.setattr("skilltree.synthesis.content.get_model", model_factory)
    monkeypatch.setattr("skilltree.synthesis.node.get_model", model_factory)
    return llm


@pytest.fixture
def app_config(tmp_path) -> AppConfig:
    return AppConfig(storage=StorageConfig(data_dir=tmp_path))


@pytest.fixture
def cache() -> MemoryNodeCache:
    return MemoryNodeCache()


@pytest.fixture
def temp_yaml_config(tmp_path, monkeypatch):
    """Write a YAML config file and point SKILLTREE_CONFIG_PATH at it."""
    config_file = tmp_path / "test-config.yaml"
    config_data = {
        "environment": "development",
        "storage": {"data_dir": str(tmp_path / "data")},
        "model": {"provider": "ollama", "name": "gpt-oss"},
        "tree": {"max_root_children": 5},
    }

    with open(config_file, "w") as f:
        yaml.dump(config_data, f)

    monkeypatch.setenv("SKILLTREE_CONFIG_PATH", str(config_file))

    yield config_file
