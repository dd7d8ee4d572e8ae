"""Shared fixtures for agentradar tests."""

import pathlib

import pytest


@pytest.fixture
def fake_home(tmp_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch) -> pathlib.Path:
    """Point ``$HOME`` at an empty temporary directory."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    return home


@pytest.fixture
def project_dir(tmp_path: pathlib.Path, fake_home: pathlib.Path) -> pathlib.Path:
    """Create an empty project directory used as the scan's cwd."""
    project = tmp_path / "project"
    project.mkdir()
    return project
