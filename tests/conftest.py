"""Pytest configuration and fixtures."""

import pytest

import settings.config
from toolchains.go import GoToolchain
from toolchains.node import NodeToolchain
from workspace.config import WorkspaceConfig

from tests.helpers import ReleaseServer, make_tarball

GO_BASE_URL = "https://dl.example.test/go"
NODE_BASE_URL = "https://dl.example.test/node"


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Drop the cached settings and any TOOLENV_* overrides."""
    for var in (
        "TOOLENV_LOG_LEVEL",
        "TOOLENV_DOWNLOAD_TIMEOUT",
        "TOOLENV_WORKSPACE_FILE",
        "TOOLENV_PARALLEL",
        "TOOLENV_FAIL_FAST",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr(settings.config, "_config", None)


@pytest.fixture
def go_archive() -> bytes:
    return make_tarball({"go/bin/go": b"#!/bin/sh\necho go\n", "go/VERSION": b"go1.11.2"})


@pytest.fixture
def release_server(go_archive) -> ReleaseServer:
    return ReleaseServer({"go1.11.2.linux-amd64.tar.gz": go_archive})


@pytest.fixture
def make_workspace(tmp_path):
    """Factory for a WorkspaceConfig rooted in a temporary directory."""

    def _make(text: str) -> WorkspaceConfig:
        return WorkspaceConfig.from_text(text, tmp_path)

    return _make


@pytest.fixture
def go_workspace(make_workspace) -> WorkspaceConfig:
    return make_workspace(
        """
workspace:
  with:
    go:
      version: 1.11.2
"""
    )


@pytest.fixture
def make_go(release_server):
    """Factory for a Go toolchain wired to the fake release server."""

    def _make(server: ReleaseServer | None = None) -> GoToolchain:
        server = server or release_server
        return GoToolchain(
            base_url=GO_BASE_URL,
            os_name="linux",
            arch="amd64",
            transport=server.transport,
        )

    return _make


@pytest.fixture
def make_node():
    """Factory for a Node toolchain wired to a fake release server."""

    def _make(server: ReleaseServer) -> NodeToolchain:
        return NodeToolchain(
            base_url=NODE_BASE_URL,
            os_name="linux",
            arch="x64",
            transport=server.transport,
        )

    return _make
