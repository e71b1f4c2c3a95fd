from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class PracticeItem(BaseModel):
    question: str
    solution: str


class Reference(BaseModel):
    title: str
    url: str


class NodeContent(BaseModel):
    """Practice items and references produced together for one node."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    practice_items: list[PracticeItem] = []
    references: list[Reference] = []

    @property
    def is_empty(self) -> bool:
        return not self.practice_items and not self.references


class Node(BaseModel):
    """A topic in the skill tree.

    A node whose practice items and references are both empty is a stub: only
    its name is known. Children keep presentation order.

    Attributes:
        name: Display label, also the source of the cache key
        children: Sub-topics, either stubs or fully built nodes
        practice_items: Question/solution pairs
        references: Links to tutorials or reading material
        collapsed: Set once the node is returned as an already-built child,
            telling renderers not to fetch it again
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str
    children: list["Node"] = []
    practice_items: list[PracticeItem] = []
    references: list[Reference] = []
    collapsed: bool = False

    @classmethod
    def stub(cls, name: str) -> "Node":
        return cls(name=name)

    @classmethod
    def degraded(cls, name: str, message: str) -> "Node":
        """Placeholder returned in place of a node whose synthesis failed."""
        return cls(
            name=name,
            practice_items=[PracticeItem(question="Error", solution=message)],
        )

    @property
    def is_stub(self) -> bool:
        return not self.practice_items and not self.references

    @property
    def has_content(self) -> bool:
        return bool(self.practice_items) and bool(self.references)

    def apply_content(self, content: NodeContent) -> None:
        """Overwrite both content fields, leaving name and children intact."""
        self.practice_items = list(content.practice_items)
        self.references = list(content.references)

    def collapse_children(self) -> None:
        for child in self.children:
            child.collapsed = True

    def to_json(self, indent: int | None = 2) -> str:
        return self.model_dump_json(by_alias=True, indent=indent)
