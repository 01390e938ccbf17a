"""Jump-target discovery: literal, hybrid, and semantic providers."""

from .literal import HybridTargetProvider, LiteralTargetProvider, filter_candidates
from .semantic import (
    DEFAULT_INCLUDED_TOKEN_TYPES,
    SemanticTargetProvider,
    SemanticToken,
    TokenLegend,
    TokenRequest,
    TokenResponse,
    decode_tokens,
)
from .types import (
    Candidate,
    Cluster,
    DensityLevel,
    JumpMode,
    LabeledCandidate,
    Position,
    ScoredCandidate,
    TextRange,
)

__all__ = [
    "Candidate",
    "Cluster",
    "DEFAULT_INCLUDED_TOKEN_TYPES",
    "DensityLevel",
    "HybridTargetProvider",
    "JumpMode",
    "LabeledCandidate",
    "LiteralTargetProvider",
    "Position",
    "ScoredCandidate",
    "SemanticTargetProvider",
    "SemanticToken",
    "TextRange",
    "TokenLegend",
    "TokenRequest",
    "TokenResponse",
    "decode_tokens",
    "filter_candidates",
]
