"""Progressive input state machine for one jump session.

Keystrokes first build a search pattern. Once the pattern is long enough and
the match set is small and unambiguous, the session switches to target
selection where keystrokes are read as labels. Two-character labels go
through an extra refinement step.

The controller only mutates its ``SearchSession`` and reports through
``ControllerDeps``; the session manager owns the key capture, overlays, and
teardown.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from ..labels.assigner import assign_labels, label_alphabet, second_phase_labels
from ..scoring.cluster import cluster_representatives
from ..scoring.score import score_candidates
from ..targets.literal import HybridTargetProvider, LiteralTargetProvider, filter_candidates
from ..targets.semantic import SemanticTargetProvider, TokenRequest, TokenResponse, decode_tokens
from ..targets.types import Candidate, JumpMode, LabeledCandidate, Position, ScoredCandidate, TextRange
from .state import JumpInstruction, JumpPhase, SearchSession

logger = logging.getLogger(__name__)

MODE_TITLES = {
    JumpMode.LITERAL: "Jump",
    JumpMode.HYBRID: "Hybrid Jump",
    JumpMode.SEMANTIC: "Semantic Jump",
}


class TargetDiscoveryError(RuntimeError):
    """A target provider or token source failed; the session cannot go on."""


@dataclass(frozen=True)
class ControllerDeps:
    """View access and presentation callbacks used by ``JumpController``."""

    visible_ranges: Callable[[], list[TextRange]]
    line_text: Callable[[int], str]
    cursor: Callable[[], Position]
    render: Callable[[SearchSession], None]
    show_status: Callable[[str], None]
    request_tokens: Callable[[TokenRequest], None] | None = None


@dataclass(frozen=True)
class Discovery:
    """Result of one discover/score/label pass."""

    scored: list[ScoredCandidate] = field(default_factory=list)
    labeled: list[LabeledCandidate] = field(default_factory=list)
    continuation_chars: frozenset[str] = frozenset()
    label_conflict: bool = False


def make_provider(session: SearchSession):
    settings = session.settings
    if session.mode is JumpMode.HYBRID:
        return HybridTargetProvider(case_sensitive=settings.case_sensitive)
    if session.mode is JumpMode.SEMANTIC:
        return SemanticTargetProvider(
            included_types=settings.included_token_types,
            case_sensitive=settings.case_sensitive,
        )
    return LiteralTargetProvider(case_sensitive=settings.case_sensitive)


class JumpController:
    """Drive one ``SearchSession`` through its phases."""

    def __init__(self, session: SearchSession, deps: ControllerDeps, provider=None) -> None:
        self.session = session
        self.deps = deps
        self.provider = provider if provider is not None else make_provider(session)

    @property
    def uses_token_requests(self) -> bool:
        return self.session.mode is JumpMode.SEMANTIC and self.deps.request_tokens is not None

    def start(self) -> None:
        self.session.phase = JumpPhase.PATTERN_BUILDING
        self._notify()

    # Discovery pipeline -------------------------------------------------

    def discover(self, pattern: str) -> Discovery:
        """Find, filter, cluster, score, and label targets for ``pattern``.

        Provider failures are re-raised as ``TargetDiscoveryError``.
        """
        session = self.session
        settings = session.settings
        cursor = self.deps.cursor()
        try:
            found = self.provider.find(pattern, cursor, self.deps.visible_ranges(), self.deps.line_text)
        except Exception as exc:
            logger.exception("target provider failed for pattern %r", pattern)
            raise TargetDiscoveryError(f"target discovery failed: {exc}") from exc

        found = filter_candidates(found, settings.max_candidates, settings.min_match_length)
        cluster_ids = None
        if settings.clustering_enabled:
            found, cluster_ids = cluster_representatives(
                found,
                max_gap=settings.cluster_max_gap,
                priorities=settings.token_priorities,
            )
        scored = score_candidates(found, cursor.line, settings.token_priorities, cluster_ids)

        continuation: frozenset[str] = frozenset()
        conflict = False
        if session.mode is JumpMode.HYBRID:
            continuation = HybridTargetProvider.continuation_chars(found)
            available = {ch.lower() for ch in label_alphabet(settings.jump_characters, continuation)}
            conflict = len(available) < len(scored)
        labeled = assign_labels(
            scored,
            settings.jump_characters,
            settings.density,
            excluded_chars=continuation,
            home_size=settings.home_size,
        )
        return Discovery(scored=scored, labeled=labeled, continuation_chars=continuation, label_conflict=conflict)

    def _refresh(self, typed: bool) -> JumpInstruction | None:
        session = self.session
        session.bump_version()
        session.first_char = ""
        session.saved_labeled = []
        session.pending_request = None
        if not session.pattern:
            return self._apply(Discovery(), typed)
        if self.uses_token_requests:
            request = TokenRequest(
                view_id=session.view_id,
                version=session.pattern_version,
                pattern=session.pattern,
                ranges=tuple(self.deps.visible_ranges()),
            )
            session.pending_request = request
            session.pending_from_typing = typed
            # Results for the previous pattern must not be selectable while waiting.
            session.labeled = []
            session.candidate_count = 0
            session.match_index = 0
            session.phase = JumpPhase.PATTERN_BUILDING
            self._notify()
            assert self.deps.request_tokens is not None
            try:
                self.deps.request_tokens(request)
            except Exception as exc:
                logger.exception("token request failed for pattern %r", session.pattern)
                raise TargetDiscoveryError(f"semantic tokens unavailable: {exc}") from exc
            return None
        return self._apply(self.discover(session.pattern), typed)

    def _apply(self, discovery: Discovery, typed: bool) -> JumpInstruction | None:
        session = self.session
        settings = session.settings
        session.labeled = list(discovery.labeled)
        session.candidate_count = len(discovery.scored)
        session.continuation_chars = discovery.continuation_chars
        session.match_index = 0

        long_enough = len(session.pattern) >= settings.min_pattern_length
        if typed and long_enough and settings.auto_jump_single_match and session.candidate_count == 1:
            return self._jump(discovery.scored[0].candidate)

        if (
            long_enough
            and session.labeled
            and 0 < session.candidate_count <= settings.auto_jump_ceiling
            and not discovery.label_conflict
        ):
            session.phase = JumpPhase.TARGET_SELECTION
        else:
            session.phase = JumpPhase.PATTERN_BUILDING
        self._notify()
        return None

    def receive_tokens(self, response: TokenResponse) -> JumpInstruction | None:
        """Apply a token response if it answers the current pattern version.

        Stale responses are dropped. A failed fetch or undecodable stream
        raises ``TargetDiscoveryError``.
        """
        session = self.session
        pending = session.pending_request
        if not session.active or pending is None or response.version != pending.version:
            logger.debug(
                "dropping stale token response v%d for %s (current v%d)",
                response.version,
                response.view_id,
                session.pattern_version,
            )
            return None
        session.pending_request = None
        if response.error is not None:
            raise TargetDiscoveryError(f"semantic tokens unavailable: {response.error}")
        if response.legend is None:
            raise TargetDiscoveryError("semantic token response has no legend")
        try:
            tokens = decode_tokens(response.data, response.legend, self.deps.line_text)
        except ValueError as exc:
            raise TargetDiscoveryError(f"malformed semantic tokens: {exc}") from exc
        self.provider.load(tokens)
        return self._apply(self.discover(session.pattern), session.pending_from_typing)

    # Keystrokes ---------------------------------------------------------

    def should_continue_pattern(self, char: str) -> bool:
        """Hybrid rule: is ``char`` a refinement of the pattern rather than a label?"""
        session = self.session
        if char.lower() not in {item.candidate.next_char.lower() for item in session.labeled}:
            return False
        try:
            extended = self.provider.find(
                session.pattern + char,
                self.deps.cursor(),
                self.deps.visible_ranges(),
                self.deps.line_text,
            )
        except Exception as exc:
            logger.exception("target provider failed while checking continuation")
            raise TargetDiscoveryError(f"target discovery failed: {exc}") from exc
        return bool(extended)

    def type_char(self, char: str) -> JumpInstruction | None:
        session = self.session
        if session.phase is JumpPhase.PATTERN_BUILDING:
            session.pattern += char
            return self._refresh(typed=True)
        if session.phase is JumpPhase.TARGET_SELECTION:
            if session.mode is JumpMode.HYBRID and self.should_continue_pattern(char):
                session.phase = JumpPhase.PATTERN_BUILDING
                session.pattern += char
                return self._refresh(typed=True)
            return self._select(char)
        if session.phase is JumpPhase.AWAITING_SECOND_CHAR:
            return self._resolve_second(char)
        return None

    def _select(self, char: str) -> JumpInstruction | None:
        session = self.session
        for item in session.labeled:
            if not item.is_sequence and item.label == char:
                return self._jump(item.candidate)
        sequences = second_phase_labels(char, session.labeled)
        if len(sequences) == 1:
            return self._jump(sequences[0].candidate)
        if not sequences:
            logger.debug("ignoring %r: no label starts with it", char)
            return None
        session.saved_labeled = list(session.labeled)
        session.labeled = sequences
        session.first_char = char
        session.match_index = 0
        session.phase = JumpPhase.AWAITING_SECOND_CHAR
        self._notify()
        return None

    def _resolve_second(self, char: str) -> JumpInstruction | None:
        for item in self.session.labeled:
            if item.second_char == char:
                return self._jump(item.candidate)
        self._restore_full_set()
        return None

    def _restore_full_set(self) -> None:
        session = self.session
        session.labeled = session.saved_labeled
        session.saved_labeled = []
        session.first_char = ""
        session.match_index = 0
        session.phase = JumpPhase.TARGET_SELECTION
        self._notify()

    def backspace(self) -> bool:
        """Step back one phase or pattern character.

        Returns ``False`` when there is nothing left to undo and the session
        should be cancelled.
        """
        session = self.session
        if session.phase is JumpPhase.AWAITING_SECOND_CHAR:
            self._restore_full_set()
            return True
        if session.phase is JumpPhase.TARGET_SELECTION:
            session.phase = JumpPhase.PATTERN_BUILDING
            self._notify()
            return True
        if session.phase is JumpPhase.PATTERN_BUILDING:
            if not session.pattern:
                return False
            session.pattern = session.pattern[:-1]
            self._refresh(typed=False)
        return True

    def enter(self) -> JumpInstruction | None:
        """Jump to the current navigation target, if any."""
        labeled = self.session.labeled
        if not labeled:
            return None
        return self._jump(labeled[self.session.match_index % len(labeled)].candidate)

    def next_match(self) -> None:
        self._step(1)

    def previous_match(self) -> None:
        self._step(-1)

    def _step(self, delta: int) -> None:
        session = self.session
        if not session.labeled:
            return
        session.match_index = (session.match_index + delta) % len(session.labeled)
        self._notify()

    def _jump(self, candidate: Candidate) -> JumpInstruction:
        self.session.phase = JumpPhase.JUMPED
        logger.debug("jumping to %d:%d", candidate.line, candidate.column)
        return JumpInstruction(view_id=self.session.view_id, candidate=candidate)

    # Presentation -------------------------------------------------------

    def status_message(self) -> str:
        session = self.session
        title = MODE_TITLES[session.mode]
        pattern = session.pattern
        count = len(session.labeled)
        if session.phase is JumpPhase.TARGET_SELECTION:
            return f'{title}: "{pattern}" → {count} matches - Press jump character'
        if session.phase is JumpPhase.AWAITING_SECOND_CHAR:
            return f'{title}: "{pattern}" → {count} matches - Press second character after "{session.first_char}"'
        if session.pending_request is not None:
            return f'{title}: "{pattern}" → searching tokens...'
        if not pattern:
            return f"{title}: Start typing to search..."
        if count == 0:
            return f'{title}: "{pattern}" → No matches'
        return f'{title}: "{pattern}" → {count} matches - Keep typing or press Enter'

    def _notify(self) -> None:
        self.deps.render(self.session)
        self.deps.show_status(self.status_message())
