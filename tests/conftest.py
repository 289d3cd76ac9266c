"""Shared test fixtures for Import Atlas tests."""

import os
from pathlib import Path

import pytest

from import_atlas.scanning import ReferenceScanner


@pytest.fixture(scope="session")
def scanner():
    """One scanner for the whole session; grammar loading is the slow part."""
    return ReferenceScanner()


@pytest.fixture
def make_project(tmp_path):
    """Write a dict of relative path -> content under tmp_path.

    Returns a function so tests can add files after the first call.
    """

    def _make(files: dict) -> Path:
        for rel, content in files.items():
            path = tmp_path / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content, encoding="utf-8")
        return tmp_path

    return _make


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Keep user/project config files and IMPORT_ATLAS_* vars out of tests."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for key in list(os.environ):
        if key.startswith("IMPORT_ATLAS_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    return tmp_path
