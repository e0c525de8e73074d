"""Pytest configuration and fixtures for atlasctl tests."""

import os

import pytest

from atlasctl.core.api.client import AtlasClient
from atlasctl.core.logging.logger import configure_logging
from atlasctl.settings import SHELL_SOURCE
from constants import BASE_URL, PROJECT_ID


@pytest.fixture(autouse=True, scope="session")
def _configure_logging():
    """Create the atlasctl logger before anything else asks for it."""
    configure_logging()


@pytest.fixture
def client(requests_mock) -> AtlasClient:
    """Return a client pointed at a mocked base URL."""
    return AtlasClient(base_url=BASE_URL)


@pytest.fixture
def cli_env(tmp_path, monkeypatch) -> str:
    """
    Isolate the CLI from the user's machine.

    Points HOME at a temporary directory, clears whitelisted variables,
    and sets API credentials and a default project.

    Returns
    -------
    str
        Path to the state file used by the CLI.
    """
    monkeypatch.setenv("HOME", str(tmp_path))
    for key in SHELL_SOURCE:
        monkeypatch.delenv(key, raising=False)
    state_file = os.path.join(str(tmp_path), "state.json")
    monkeypatch.setenv("ATLAS_PUBLIC_KEY", "public")
    monkeypatch.setenv("ATLAS_PRIVATE_KEY", "private")
    monkeypatch.setenv("PROJECT_ID", PROJECT_ID)
    monkeypatch.setenv("STATE_FILE", state_file)
    return state_file
