"""Connector and status glyph sets for the console tree."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Theme:
    """Glyphs used to draw the tree.

    ``blank``, ``pipe``, ``entry`` and ``end`` share one width so that
    columns line up at every depth.
    """

    name: str
    blank: str
    pipe: str
    entry: str
    end: str
    down: str
    dash: str
    successful: str
    failed: str
    skipped: str
    details: str

    @classmethod
    def by_name(cls, name: str) -> Theme:
        """Look up a built-in theme, ignoring case.

        Raises:
            ValueError: If no theme has that name.
        """
        theme = THEMES.get(name.strip().lower())
        if theme is None:
            choices = ", ".join(sorted(THEMES))
            raise ValueError(f"Unknown theme: {name!r} (expected one of {choices})")
        return theme


ASCII = Theme(
    name="ascii",
    blank="   ",
    pipe="|  ",
    entry="+- ",
    end="'- ",
    down="+- ",
    dash="-- ",
    successful="[OK] ",
    failed="[XX] ",
    skipped="[??] ",
    details="[**] ",
)

UNICODE = Theme(
    name="unicode",
    blank="   ",
    pipe="│  ",
    entry="├─ ",
    end="└─ ",
    down="┬─ ",
    dash="── ",
    successful="✔ ",
    failed="✘ ",
    skipped="↷ ",
    details="■ ",
)

EMOJI = Theme(
    name="emoji",
    blank="   ",
    pipe="│  ",
    entry="├─ ",
    end="└─ ",
    down="┬─ ",
    dash="── ",
    successful="✅ ",
    failed="\U0001f4a5 ",
    skipped="\U0001f6ab ",
    details="\U0001f4c4 ",
)

THEMES: dict[str, Theme] = {theme.name: theme for theme in (ASCII, UNICODE, EMOJI)}
