from __future__ import annotations

import re
import shutil
from pathlib import Path

from pygments.formatters import HtmlFormatter

IMG_SRC_RE = re.compile(r'<img([^>]*?)src="([^"]+)"', re.IGNORECASE)
PLACEHOLDER_RE = re.compile(r"\{\{(\w+)\}\}")
DEFAULT_THEME_DIR = Path(__file__).parent / "theme"


def fix_relative_img_src(html_text: str, root: str = "") -> str:
    # Relative image paths resolve from the site root.
    def repl(match: re.Match) -> str:
        attrs = match.group(1)
        src = match.group(2)
        if src.startswith(("http://", "https://", "data:", "#", "/")):
            return match.group(0)
        src = src.lstrip("./")
        return f'<img{attrs}src="{root}/{src}"'

    return IMG_SRC_RE.sub(repl, html_text)


def render_template(template: str, **context: str) -> str:
    # Single pass, so placeholders inside substituted values stay literal.
    def repl(match: re.Match) -> str:
        key = match.group(1)
        return context[key] if key in context else match.group(0)

    return PLACEHOLDER_RE.sub(repl, template)


def read_template(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def output_path_for(path: str) -> Path:
    """Map a site path to the file that serves it."""
    if path == "/":
        return Path("index.html")
    rel = path.strip("/")
    if rel == "404":
        return Path("404.html")
    if rel.endswith(".xml"):
        return Path(rel)
    return Path(rel) / "index.html"


def write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def highlight_css(style: str = "default") -> str:
    return HtmlFormatter(style=style).get_style_defs(".codehilite")


def copy_static(static_dir: Path, output_dir: Path) -> None:
    output_dir.mkdir(parents=True, exist_ok=True)
    for item in static_dir.iterdir():
        dest = output_dir / item.name
        if item.is_dir():
            shutil.copytree(item, dest, dirs_exist_ok=True)
        else:
            shutil.copy2(item, dest)
