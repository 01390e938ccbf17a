"""UI theme definitions and selection helpers.

Themes are ANSI palettes for jump overlays and chrome. Syntax highlighting
style for source code remains a separate Pygments setting.
"""

from __future__ import annotations

from dataclasses import dataclass

from .render.overlay import StyleCategory


@dataclass(frozen=True)
class JumpTheme:
    """Semantic ANSI palette used by the viewport renderer."""

    name: str
    reset: str
    gutter: str
    cursor_line: str
    match_primary: str
    match_secondary: str
    label: str
    status: str
    status_notice: str

    def style_for(self, category: StyleCategory) -> str:
        if category is StyleCategory.PRIMARY:
            return self.match_primary
        if category is StyleCategory.SECONDARY:
            return self.match_secondary
        return self.label


DEFAULT_THEME = JumpTheme(
    name="default",
    reset="\033[0m",
    gutter="\033[2;38;5;245m",
    cursor_line="\033[1;38;5;229m",
    match_primary="\033[1;30;48;5;220m",
    match_secondary="\033[38;5;16;48;5;110m",
    label="\033[1;38;5;231;48;5;161m",
    status="\033[1;38;5;81m",
    status_notice="\033[1;38;5;203m",
)

OCEAN_THEME = JumpTheme(
    name="ocean",
    reset="\033[0m",
    gutter="\033[2;38;5;31m",
    cursor_line="\033[1;38;5;153m",
    match_primary="\033[1;30;48;5;45m",
    match_secondary="\033[38;5;16;48;5;73m",
    label="\033[1;38;5;231;48;5;25m",
    status="\033[1;38;5;45m",
    status_notice="\033[1;38;5;215m",
)

PLAIN_THEME = JumpTheme(
    name="plain",
    reset="",
    gutter="",
    cursor_line="",
    match_primary="",
    match_secondary="",
    label="",
    status="",
    status_notice="",
)

_THEMES: dict[str, JumpTheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> JumpTheme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]


__all__ = [
    "DEFAULT_THEME",
    "JumpTheme",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "available_theme_names",
    "normalize_theme_name",
    "resolve_theme",
]
