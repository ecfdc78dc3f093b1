"""Rewrite articles through the OpenAI chat API.

Each file is processed on its own: the original is kept next to it as
``<name>.draft<ext>`` and restored when the rewrite fails. Files that already
have a draft sibling are skipped, so running the command twice is safe.
"""

from __future__ import annotations

import argparse
import os
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

import openai
from dotenv import load_dotenv

from .content import CONTENT_SUFFIXES
from .errors import EnhanceError

DEFAULT_MODEL = "gpt-4o"
MAX_OUTPUT_TOKENS = 4000
TEMPERATURE = 0.7

PROMPT = (
    "You are an expert software engineer and technical writer. Review and enhance this article "
    "so it reads like a section from a technical book for experienced developers. Keep the "
    "front matter block and the MDX/Markdown format intact, keep every code example, and "
    "explain each example, concept and bullet point in detail. Aim for 1000 words or more "
    "and a friendly tone, like a workshop talk. Return only the article."
)


class TextGenerator(ABC):
    @abstractmethod
    def generate(self, system_prompt: str, user_prompt: str) -> str:
        """Return the rewritten text for `user_prompt`."""


class OpenAIRewriter(TextGenerator):
    def __init__(self, api_key: str, model: str = DEFAULT_MODEL):
        self._client = openai.OpenAI(api_key=api_key)
        self._model = model

    def generate(self, system_prompt: str, user_prompt: str) -> str:
        try:
            response = self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=TEMPERATURE,
                max_tokens=MAX_OUTPUT_TOKENS,
            )
        except openai.APIError as exc:
            raise EnhanceError(f"OpenAI API call failed: {exc}") from exc
        return response.choices[0].message.content or ""


def draft_path_for(path: Path) -> Path:
    return path.with_name(f"{path.stem}.draft{path.suffix}")


def find_files_to_enhance(content_dir: Path) -> list[Path]:
    if not content_dir.is_dir():
        raise EnhanceError(f"Content directory not found: {content_dir}")
    files = []
    for path in sorted(content_dir.iterdir(), key=lambda p: p.name):
        if not path.is_file() or path.suffix.lower() not in CONTENT_SUFFIXES:
            continue
        if ".draft" in path.suffixes or draft_path_for(path).exists():
            continue
        files.append(path)
    return files


def enhance_file(path: Path, generator: TextGenerator) -> Path:
    """Rewrite ``path`` in place and return the path of the kept original."""
    original: Optional[str] = None
    draft_path: Optional[Path] = None
    try:
        original = path.read_text(encoding="utf-8")
        enhanced = generator.generate(PROMPT, original)
        if not enhanced.strip():
            raise EnhanceError("No content received from the text-generation API")
        draft_path = draft_path_for(path)
        os.replace(path, draft_path)
        path.write_text(enhanced, encoding="utf-8")
        return draft_path
    except (OSError, EnhanceError) as exc:
        if draft_path is not None and draft_path.exists():
            os.replace(draft_path, path)
            print(f"Restored {path.name} from {draft_path.name}.", file=sys.stderr)
        elif original is not None and not path.exists():
            path.write_text(original, encoding="utf-8")
            print(f"Restored original content of {path.name}.", file=sys.stderr)
        if isinstance(exc, EnhanceError):
            raise
        raise EnhanceError(f"Cannot rewrite {path}: {exc}") from exc


def main() -> None:
    load_dotenv()
    parser = argparse.ArgumentParser(description="Rewrite articles with the OpenAI API, keeping .draft backups.")
    parser.add_argument("--content", default="src/posts", help="Directory containing MDX/Markdown articles.")
    parser.add_argument("--model", default=os.getenv("OPENAI_MODEL", DEFAULT_MODEL), help="OpenAI model name.")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List the files that would be rewritten without calling the API.",
    )
    args = parser.parse_args()

    try:
        files = find_files_to_enhance(Path(args.content))
    except EnhanceError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    if not files:
        print("No new articles found to process.")
        return
    print(f"Found {len(files)} articles to process.")
    if args.dry_run:
        for path in files:
            print(f" - {path}")
        return

    api_key = os.getenv("OPENAI_API_KEY", "")
    if not api_key:
        print("OPENAI_API_KEY is required. Set it in .env or the environment.", file=sys.stderr)
        sys.exit(1)
    generator = OpenAIRewriter(api_key, args.model)
    for path in files:
        print(f"Processing {path} ...")
        try:
            draft_path = enhance_file(path, generator)
        except EnhanceError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            sys.exit(1)
        print(f"Rewrote {path.name}; original kept as {draft_path.name}.")
