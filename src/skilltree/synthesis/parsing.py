import json
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, ValidationError, field_validator

from skilltree.store.models import NodeContent, PracticeItem, Reference
from skilltree.synthesis.exceptions import SynthesisError

FENCE_PREFIXES = ("```json", "```JSON", "```")
FENCE_SUFFIX = "```"


def strip_code_fence(text: str) -> str:
    """Remove a markdown code fence wrapped around a model response."""
    cleaned = text.strip()
    for prefix in FENCE_PREFIXES:
        if cleaned.startswith(prefix):
            cleaned = cleaned[len(prefix) :]
            break
    if cleaned.endswith(FENCE_SUFFIX):
        cleaned = cleaned[: -len(FENCE_SUFFIX)]
    return cleaned.strip()


def parse_json_object(text: str) -> dict[str, Any]:
    """Decode a model response that should hold exactly one JSON object.

    Raises:
        SynthesisError: If the text is not JSON or not an object.
    """
    cleaned = strip_code_fence(text)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise SynthesisError(f"Model returned invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise SynthesisError(
            f"Model returned JSON {type(data).__name__}, expected an object"
        )
    return data


class GeneratedPracticeItem(BaseModel):
    question: str = Field(validation_alias=AliasChoices("q", "question"))
    solution: str = Field(validation_alias=AliasChoices("s", "solution"))


class GeneratedReference(BaseModel):
    title: str
    url: str


class GeneratedContent(BaseModel):
    """Content fields as the model writes them."""

    practice_items: list[GeneratedPracticeItem] = Field(
        default=[],
        validation_alias=AliasChoices(
            "practiceItems", "practiceProblems", "practice_items"
        ),
    )
    references: list[GeneratedReference] = Field(
        default=[],
        validation_alias=AliasChoices("videoTutorials", "references"),
    )

    @field_validator("practice_items", "references", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    def to_content(self) -> NodeContent:
        return NodeContent(
            practice_items=[
                PracticeItem(question=p.question, solution=p.solution)
                for p in self.practice_items
            ],
            references=[
                Reference(title=r.title, url=r.url) for r in self.references
            ],
        )


class GeneratedNode(GeneratedContent):
    """A full node as the model writes it; children carry names only."""

    name: str | None = None
    children: list[str] = []

    @field_validator("children", mode="before")
    @classmethod
    def _child_names(cls, value: Any) -> list[str]:
        if value is None:
            return []
        if not isinstance(value, list):
            raise ValueError("children must be a list")
        names = []
        for entry in value:
            if isinstance(entry, dict):
                entry = entry.get("name")
            if isinstance(entry, str) and entry.strip():
                names.append(entry.strip())
        return names


def parse_content(text: str) -> NodeContent:
    data = parse_json_object(text)
    try:
        return GeneratedContent.model_validate(data).to_content()
    except ValidationError as e:
        raise SynthesisError(f"Model returned malformed content: {e}") from e


def parse_node(text: str) -> GeneratedNode:
    data = parse_json_object(text)
    try:
        return GeneratedNode.model_validate(data)
    except ValidationError as e:
        raise SynthesisError(f"Model returned a malformed node: {e}") from e
