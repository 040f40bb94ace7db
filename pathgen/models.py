"""Core data models shared across pathgen components."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, Union


class TokenKind(str, Enum):
    """Placeholder syntaxes recognised in prompt templates."""

    SIMPLE = "simple"
    NAMED_CHOICE = "named_choice"
    ANONYMOUS_CHOICE = "anonymous_choice"
    RADIO = "radio"
    AI_INPUT = "ai_input"


@dataclass(frozen=True)
class SimpleToken:
    """`{{name}}` placeholder filled from a value map."""

    raw: str
    start: int
    name: str
    kind: TokenKind = field(default=TokenKind.SIMPLE, init=False)

    @property
    def end(self) -> int:
        return self.start + len(self.raw)


@dataclass(frozen=True)
class NamedChoiceToken:
    """`{{name:opt1,opt2|default}}` placeholder."""

    raw: str
    start: int
    name: str
    options: Tuple[str, ...]
    default: Optional[str] = None
    kind: TokenKind = field(default=TokenKind.NAMED_CHOICE, init=False)

    @property
    def end(self) -> int:
        return self.start + len(self.raw)


@dataclass(frozen=True)
class AnonymousChoiceToken:
    """`{{opt1,opt2|default}}` placeholder."""

    raw: str
    start: int
    options: Tuple[str, ...]
    default: Optional[str] = None
    kind: TokenKind = field(default=TokenKind.ANONYMOUS_CHOICE, init=False)

    @property
    def end(self) -> int:
        return self.start + len(self.raw)


@dataclass(frozen=True)
class RadioToken:
    """`{{radio|opt1,opt2|default}}` single-pick placeholder."""

    raw: str
    start: int
    options: Tuple[str, ...]
    default: Optional[str] = None
    kind: TokenKind = field(default=TokenKind.RADIO, init=False)

    @property
    def end(self) -> int:
        return self.start + len(self.raw)


@dataclass(frozen=True)
class AiInputToken:
    """`{{ai|prompt|default}}` placeholder answered by the text-generation provider."""

    raw: str
    start: int
    prompt: str
    default: Optional[str] = None
    kind: TokenKind = field(default=TokenKind.AI_INPUT, init=False)

    @property
    def end(self) -> int:
        return self.start + len(self.raw)


Token = Union[SimpleToken, NamedChoiceToken, AnonymousChoiceToken, RadioToken, AiInputToken]
ChoiceToken = Union[NamedChoiceToken, AnonymousChoiceToken, RadioToken, AiInputToken]


class PathKind(str, Enum):
    """Kind of filesystem entry proposed by a path plan."""

    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class PathPlanItem:
    """Normalised plan entry; `content` is empty for files and None for directories."""

    path: str
    kind: PathKind
    content: Optional[str] = None


@dataclass(frozen=True)
class FailedPath:
    """A path that could not be written, with the underlying reason."""

    path: str
    reason: str


@dataclass
class GenerationResult:
    """Outcome buckets of a generation pass."""

    created: List[str] = field(default_factory=list)
    overwritten: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failed: List[FailedPath] = field(default_factory=list)
    fallbacks: List[str] = field(default_factory=list)

    def summary(self) -> str:
        parts = []
        if self.created:
            parts.append(f"created {len(self.created)}")
        if self.overwritten:
            parts.append(f"overwritten {len(self.overwritten)}")
        if self.skipped:
            parts.append(f"skipped {len(self.skipped)}")
        return ", ".join(parts) if parts else "no changes"


@dataclass(frozen=True)
class PlanOutcome:
    """Path plan plus whether the static fallback plan had to be used."""

    items: List[PathPlanItem]
    fallback: bool = False
    reason: Optional[str] = None


@dataclass(frozen=True)
class ContentOutcome:
    """Generated file content plus whether fallback content was substituted."""

    text: str
    fallback: bool = False
    reason: Optional[str] = None


@dataclass
class ExistingPathsSummary:
    """Sorted snapshot of directories and files already in the workspace."""

    directories: List[str] = field(default_factory=list)
    files: List[str] = field(default_factory=list)
    total: int = 0
