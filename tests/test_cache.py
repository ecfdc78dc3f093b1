"""Unit tests for the build manifest."""

import json
from pathlib import Path

from mdxsite.cache import LOCK_VERSION, diff_manifest, hash_text, load_lock, write_lock


def test_diff_manifest() -> None:
    previous = {"/": "a", "/old": "b", "/same": "c"}
    current = {"/": "z", "/new": "d", "/same": "c"}

    assert diff_manifest(previous, current) == ({"/new"}, {"/old"}, {"/"})


def test_hash_text_is_stable() -> None:
    assert hash_text("page") == hash_text("page")
    assert hash_text("page") != hash_text("page ")


def test_lock_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "build.lock.json"
    data = {"version": LOCK_VERSION, "routes": {"/": "abc"}}
    write_lock(path, data)
    assert load_lock(path) == data


def test_unusable_lock_files(tmp_path: Path) -> None:
    path = tmp_path / "build.lock.json"
    assert load_lock(path) == {}

    path.write_text("{not json", encoding="utf-8")
    assert load_lock(path) == {}

    path.write_text(json.dumps({"version": LOCK_VERSION + 1, "routes": {}}), encoding="utf-8")
    assert load_lock(path) == {}
