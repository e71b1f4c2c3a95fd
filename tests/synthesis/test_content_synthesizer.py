import json

from skilltree.synthesis.content import ContentSynthesizer


async def test_generate_content(app_config, fake_llm):
    synthesizer = ContentSynthesizer(app_config)

    content = await synthesizer.generate("Espresso", [])

    assert fake_llm.content_calls == ["Espresso"]
    assert len(content.practice_items) == 3
    assert len(content.references) == 2
    assert content.practice_items[0].question == "Espresso question 0"


async def test_prompt_includes_ancestor_chain(app_config, fake_llm):
    synthesizer = ContentSynthesizer(app_config)

    await synthesizer.generate("Espresso", ["Coffee", "Brewing"])

    prompt = fake_llm.prompts[-1]
    assert 'Topic: "Espresso"' in prompt
    assert '"Coffee > Brewing"' in prompt
    assert "Exactly 3 practice problems" in prompt


async def test_prompt_without_ancestors_has_no_context(app_config, fake_llm):
    synthesizer = ContentSynthesizer(app_config)

    await synthesizer.generate("Coffee", [])

    assert "sub-topic within" not in fake_llm.prompts[-1]


async def test_fenced_reply_is_parsed(app_config, fake_llm):
    fake_llm.contents["Espresso"] = (
        "```json\n" + json.dumps(fake_llm.content_reply("Espresso")) + "\n```"
    )
    synthesizer = ContentSynthesizer(app_config)

    content = await synthesizer.generate("Espresso", [])

    assert not content.is_empty


async def test_model_failure_returns_empty_content(app_config, fake_llm):
    fake_llm.contents["Espresso"] = RuntimeError("quota exceeded")
    synthesizer = ContentSynthesizer(app_config)

    content = await synthesizer.generate("Espresso", [])

    assert content.is_empty
    assert fake_llm.content_calls == ["Espresso"]


async def test_unparseable_reply_returns_empty_content(app_config, fake_llm):
    fake_llm.contents["Espresso"] = "I cannot help with that."
    synthesizer = ContentSynthesizer(app_config)

    content = await synthesizer.generate("Espresso", [])

    assert content.is_empty
