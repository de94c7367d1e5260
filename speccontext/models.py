"""Data models for the speccontext engine."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List


class DocumentClass(str, Enum):
    """The three classes of specification documents."""
    SPEC = "spec"
    DESIGN_SPEC = "designSpec"
    REQUIREMENT = "requirement"

    @property
    def label(self) -> str:
        return {
            DocumentClass.SPEC: "spec",
            DocumentClass.DESIGN_SPEC: "design spec",
            DocumentClass.REQUIREMENT: "requirement",
        }[self]


@dataclass
class SpecDocument:
    """A document owned by the context store."""
    path: str
    doc_class: DocumentClass
    content: str = ""


@dataclass
class IndexHit:
    """A candidate returned by the relevance index."""
    id: str
    score: int


@dataclass
class RankedEntry:
    """A single ranked context entry."""
    path: str
    content: str
    score: int

    def to_dict(self) -> Dict[str, Any]:
        return {"path": self.path, "content": self.content, "score": self.score}


@dataclass
class ContextBundle:
    """Ranked context for all three document classes."""
    specs: List[RankedEntry] = field(default_factory=list)
    design_specs: List[RankedEntry] = field(default_factory=list)
    requirements: List[RankedEntry] = field(default_factory=list)

    def for_class(self, doc_class: DocumentClass) -> List[RankedEntry]:
        if doc_class is DocumentClass.SPEC:
            return self.specs
        if doc_class is DocumentClass.DESIGN_SPEC:
            return self.design_specs
        return self.requirements

    def to_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        return {
            "specs": [e.to_dict() for e in self.specs],
            "design_specs": [e.to_dict() for e in self.design_specs],
            "requirements": [e.to_dict() for e in self.requirements],
        }


@dataclass(frozen=True)
class DiffOp:
    """One aligned line: tag is 'same', 'add' or 'remove'."""
    tag: str
    line: str


@dataclass
class ChapterDiff:
    """Line operations for a single chapter."""
    heading: str
    ops: List[DiffOp] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return any(op.tag != "same" for op in self.ops)
