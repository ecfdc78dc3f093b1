from __future__ import annotations

import re

import markdown
from markdown.extensions import Extension
from markdown.preprocessors import Preprocessor

LIST_MARKER_RE = re.compile(r"^(?P<indent>[ \t]*)(?:[-+*]|\d+[.)])\s+")
FENCE_RE = re.compile(r"^(?P<indent>[ \t]*)(`{3,}|~{3,})")
ESM_RE = re.compile(r"^(import\s.+\sfrom\s|import\s+['\"]|export\s+(const|let|var|function|class|default)\b)")
JSX_LINE_RE = re.compile(r"^\s*<[A-Z][\w.]*(\s[^>]*)?/>\s*$")

MARKDOWN_EXTENSIONS = ["fenced_code", "tables", "codehilite"]
MARKDOWN_EXTENSION_CONFIGS = {
    "codehilite": {"css_class": "codehilite", "guess_lang": False, "linenums": True},
}


def iter_fenced(lines: list[str]):
    """Yield (line, in_fence) pairs, tracking fenced code blocks."""
    in_fence = False
    fence_marker = ""
    for line in lines:
        fence_match = FENCE_RE.match(line)
        if fence_match:
            marker = fence_match.group(2)
            if not in_fence:
                in_fence = True
                fence_marker = marker
            elif marker == fence_marker:
                in_fence = False
                fence_marker = ""
            yield line, True
            continue
        yield line, in_fence


def strip_mdx_syntax(lines: list[str]) -> list[str]:
    # ESM statements and self-closing JSX components have no static rendering.
    out = []
    for line, in_fence in iter_fenced(lines):
        if not in_fence and (ESM_RE.match(line) or JSX_LINE_RE.match(line)):
            continue
        out.append(line)
    return out


def normalize_list_spacing(lines: list[str]) -> list[str]:
    out: list[str] = []
    for line, in_fence in iter_fenced(lines):
        if not in_fence:
            list_match = LIST_MARKER_RE.match(line)
            if list_match and not list_match.group("indent"):
                if out and out[-1].strip() and not LIST_MARKER_RE.match(out[-1]):
                    out.append("")
        out.append(line)
    return out


class MdxCleanupPreprocessor(Preprocessor):
    def run(self, lines):
        return normalize_list_spacing(strip_mdx_syntax(lines))


class MdxCleanupExtension(Extension):
    def extendMarkdown(self, md):
        md.preprocessors.register(MdxCleanupPreprocessor(md), "mdx_cleanup", 35)


def render_body(body: str) -> str:
    md = markdown.Markdown(
        extensions=[MdxCleanupExtension(), *MARKDOWN_EXTENSIONS],
        extension_configs=MARKDOWN_EXTENSION_CONFIGS,
    )
    return md.convert(body)
