from __future__ import annotations

import json
import sys
from pathlib import Path

import yaml

try:
    import tomllib as toml
except ImportError:
    import tomli as toml


def load_config(path: Path) -> dict:
    if not path.exists():
        return {}
    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")
    if suffix == ".toml":
        try:
            data = toml.loads(text)
        except toml.TOMLDecodeError as exc:
            print(f"Invalid TOML in config file {path}: {exc}", file=sys.stderr)
            sys.exit(1)
        return data
    if suffix in {".yml", ".yaml"}:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            print(f"Invalid YAML in config file {path}: {exc}", file=sys.stderr)
            sys.exit(1)
        if data is None:
            return {}
        if not isinstance(data, dict):
            print(f"YAML config must be a mapping: {path}", file=sys.stderr)
            sys.exit(1)
        return data
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        print(f"Invalid JSON in config file {path}: {exc}", file=sys.stderr)
        sys.exit(1)
    if not isinstance(data, dict):
        print(f"JSON config must be a mapping: {path}", file=sys.stderr)
        sys.exit(1)
    return data


def load_aliases(config: dict) -> dict[str, str]:
    aliases = config.get("aliases")
    if aliases is None:
        return {"/article": "/articles"}
    if not isinstance(aliases, dict):
        print("Config key 'aliases' must be a mapping of path to target.", file=sys.stderr)
        sys.exit(1)
    return {"/" + str(key).strip("/"): "/" + str(value).strip("/") for key, value in aliases.items()}
