"""Tests for the project metadata."""

from __future__ import annotations

from pathlib import Path

import pytest

tomllib = pytest.importorskip("tomllib")

ROOT = Path(__file__).resolve().parents[1]


def _project() -> dict:
    with open(ROOT / "pyproject.toml", "rb") as fh:
        return tomllib.load(fh)["project"]


class TestProjectMetadata:
    def test_readme_is_shipped_file(self):
        readme = _project().get("readme")
        if readme is not None:
            assert (ROOT / readme).is_file()
            assert readme.lower().startswith("readme")

    def test_runtime_dependencies(self):
        deps = " ".join(_project()["dependencies"])
        for name in ("numpy", "dash", "loguru", "pydantic-settings"):
            assert name in deps
