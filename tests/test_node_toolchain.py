"""Tests for the Node.js toolchain extension."""

from extensions.tasks import run_setup_tasks
from toolchains.node import NodeToolchain

from tests.helpers import ReleaseServer, make_tarball

NODE_WORKSPACE = """
workspace:
  with:
    node:
      version: 20.11.1
      npm_prefix: .npm-global
      node_env: development
"""


def node_server() -> ReleaseServer:
    archive = make_tarball(
        {
            "node-v20.11.1-linux-x64/bin/node": b"node",
            "node-v20.11.1-linux-x64/bin/npm": b"npm",
        }
    )
    return ReleaseServer({"node-v20.11.1-linux-x64.tar.gz": archive})


def test_archive_url(make_node, make_workspace):
    node = make_node(node_server())
    node.init(make_workspace(NODE_WORKSPACE))

    assert node.archive_url() == (
        "https://dl.example.test/node/v20.11.1/node-v20.11.1-linux-x64.tar.gz"
    )


def test_leading_v_is_accepted(make_node, make_workspace):
    node = make_node(node_server())
    node.init(make_workspace("workspace:\n  with:\n    node:\n      version: v20.11.1\n"))

    assert node.archive_name() == "node-v20.11.1-linux-x64.tar.gz"


def test_install_renames_archive_root(make_node, make_workspace, tmp_path):
    server = node_server()
    node = make_node(server)
    node.init(make_workspace(NODE_WORKSPACE))

    run_setup_tasks(node.setup_tasks(), extension=str(node))

    assert (tmp_path / ".node" / "20.11.1" / "node" / "bin" / "node").exists()
    assert node.setup_tasks() == []
    assert len(server.requests) == 1


def test_environment_and_paths(make_node, make_workspace, tmp_path):
    node = make_node(node_server())
    node.init(make_workspace(NODE_WORKSPACE))
    root = tmp_path.resolve()

    assert node.environment() == {
        "NPM_CONFIG_PREFIX": str(root / ".npm-global"),
        "NODE_ENV": "development",
    }
    assert node.paths() == [
        str(root / ".node" / "20.11.1" / "node" / "bin"),
        str(root / ".npm-global" / "bin"),
    ]


def test_minimal_config(make_node, make_workspace, tmp_path):
    node = make_node(node_server())
    node.init(make_workspace("workspace:\n  with:\n    node:\n      version: 20.11.1\n"))

    assert node.environment() == {}
    assert len(node.paths()) == 1


def test_windows_layout(make_workspace):
    node = NodeToolchain(os_name="windows", arch="x64")
    node.init(make_workspace("workspace:\n  with:\n    node:\n      version: 20.11.1\n"))

    assert node.archive_url() == (
        "https://nodejs.org/dist/v20.11.1/node-v20.11.1-win-x64.zip"
    )
    assert node.binary_path() == node.home_dir() / "node.exe"


def test_both_version_spellings_share_an_install(make_node, make_workspace, tmp_path):
    server = node_server()
    plain = make_node(server)
    plain.init(make_workspace("workspace:\n  with:\n    node:\n      version: 20.11.1\n"))
    prefixed = make_node(server)
    prefixed.init(make_workspace("workspace:\n  with:\n    node:\n      version: v20.11.1\n"))

    assert prefixed.binary_path() == plain.binary_path()
    assert prefixed.lock_path() == plain.lock_path()
    assert plain.lock_path() == tmp_path.resolve() / ".node" / "20.11.1.lock"
    assert prefixed.paths() == plain.paths()

    run_setup_tasks(plain.setup_tasks())

    assert prefixed.setup_tasks() == []
    assert len(server.requests) == 1
