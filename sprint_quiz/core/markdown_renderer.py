"""Markdown rendering for question prompts and explanations.

Catalog text is authored as plain markdown (links in references, emphasis and
line breaks in explanations). The API returns both the raw text and an HTML
fragment so clients do not need their own markdown parser.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from markdown_it import MarkdownIt


@dataclass(slots=True)
class MarkdownRenderer:
    """Converts markdown into HTML fragments."""

    enable_html: bool = False
    _markdown: MarkdownIt = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._markdown = (
            MarkdownIt("commonmark", {"html": self.enable_html, "breaks": True})
            .enable("table")
            .enable("strikethrough")
        )

    def render_fragment(self, markdown_text: str | None) -> str | None:
        """Render a markdown string into an HTML fragment; blank input yields None."""

        sanitized = (markdown_text or "").strip()
        if not sanitized:
            return None
        return self._markdown.render(sanitized)


# Shared instance; MarkdownIt is safe to reuse for read-only renders.
renderer = MarkdownRenderer()
