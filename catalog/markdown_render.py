# catalog/markdown_render.py
"""Markdown -> HTML for review bodies. Raw HTML in the source is escaped, not passed through."""
from __future__ import annotations

import markdown
from markdown.extensions import Extension

BASE_MD_EXTENSIONS = ["sane_lists", "smarty"]


class EscapeHtmlExtension(Extension):
    def extendMarkdown(self, md_inst):
        md_inst.preprocessors.deregister("html_block")
        md_inst.inlinePatterns.deregister("html")


def _markdown_renderer() -> markdown.Markdown:
    return markdown.Markdown(extensions=[*BASE_MD_EXTENSIONS, EscapeHtmlExtension()])


def render(text: str | None) -> str:
    if not text:
        return ""
    md = _markdown_renderer()
    return md.convert(text)
