"""Session phases and the mutable state of one jump operation."""

from __future__ import annotations

from contextlib import ExitStack
from dataclasses import dataclass, field
from enum import Enum

from ..config import JumpSettings
from ..targets.semantic import TokenRequest
from ..targets.types import Candidate, JumpMode, LabeledCandidate, Position


class JumpPhase(str, Enum):
    IDLE = "idle"
    PATTERN_BUILDING = "pattern_building"
    TARGET_SELECTION = "target_selection"
    AWAITING_SECOND_CHAR = "awaiting_second_char"
    JUMPED = "jumped"
    CANCELLED = "cancelled"

    @property
    def terminal(self) -> bool:
        return self in (JumpPhase.JUMPED, JumpPhase.CANCELLED)


@dataclass(frozen=True)
class JumpInstruction:
    """Where the host should put the cursor once a target is chosen."""

    view_id: str
    candidate: Candidate
    reveal_center: bool = True

    @property
    def position(self) -> Position:
        return self.candidate.position


@dataclass
class SearchSession:
    """State owned by one jump session on one view.

    ``labeled`` is the live set the user can select from. While awaiting the
    second character of a sequence it is narrowed to that prefix and
    ``saved_labeled`` keeps the full set to restore. ``resources`` holds the
    key capture and overlay handles and is closed on every terminal path.
    """

    view_id: str
    mode: JumpMode
    settings: JumpSettings
    phase: JumpPhase = JumpPhase.IDLE
    pattern: str = ""
    pattern_version: int = 0
    labeled: list[LabeledCandidate] = field(default_factory=list)
    saved_labeled: list[LabeledCandidate] = field(default_factory=list)
    first_char: str = ""
    match_index: int = 0
    candidate_count: int = 0
    continuation_chars: frozenset[str] = frozenset()
    pending_request: TokenRequest | None = None
    pending_from_typing: bool = False
    resources: ExitStack = field(default_factory=ExitStack)

    @property
    def active(self) -> bool:
        return not self.phase.terminal

    def bump_version(self) -> int:
        self.pattern_version += 1
        return self.pattern_version
