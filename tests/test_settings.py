"""Tests for settings loading."""

from settings.config import Config, get_config, load_config, reload_config


def test_defaults():
    config = Config()

    assert config.logging.level == "WARNING"
    assert config.download.timeout == 60.0
    assert config.activation.parallel is False
    assert config.activation.fail_fast is False
    assert config.activation.workspace_file == ".workspace.yaml"
    assert config.base_urls() == {}


def test_load_from_toml(tmp_path):
    path = tmp_path / "toolenv.toml"
    path.write_text(
        """
[logging]
level = "DEBUG"

[download]
timeout = 15

[activation]
parallel = true
enabled_toolchains = ["go"]

[toolchains.go]
base_url = "https://mirror.example/go"

[toolchains.node]
"""
    )

    config = load_config(path)

    assert config.logging.level == "DEBUG"
    assert config.download.timeout == 15
    assert config.activation.parallel is True
    assert config.activation.enabled_toolchains == ["go"]
    assert config.base_urls() == {"go": "https://mirror.example/go"}


def test_env_overrides_file(tmp_path, monkeypatch):
    path = tmp_path / "toolenv.toml"
    path.write_text("[download]\ntimeout = 15\n")
    monkeypatch.setenv("TOOLENV_DOWNLOAD_TIMEOUT", "90")
    monkeypatch.setenv("TOOLENV_PARALLEL", "yes")
    monkeypatch.setenv("TOOLENV_FAIL_FAST", "0")
    monkeypatch.setenv("TOOLENV_LOG_LEVEL", "INFO")

    config = load_config(path)

    assert config.download.timeout == 90.0
    assert config.activation.parallel is True
    assert config.activation.fail_fast is False
    assert config.logging.level == "INFO"


def test_invalid_env_values_are_ignored(tmp_path, monkeypatch):
    monkeypatch.setenv("TOOLENV_DOWNLOAD_TIMEOUT", "soon")
    monkeypatch.setenv("TOOLENV_PARALLEL", "maybe")

    config = load_config(tmp_path / "missing.toml")

    assert config.download.timeout == 60.0
    assert config.activation.parallel is False


def test_config_file_found_in_parent(tmp_path, monkeypatch):
    (tmp_path / "toolenv.toml").write_text('[logging]\nlevel = "ERROR"\n')
    child = tmp_path / "a" / "b"
    child.mkdir(parents=True)
    monkeypatch.chdir(child)

    assert load_config().logging.level == "ERROR"


def test_get_config_is_cached(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    first = get_config()
    assert get_config() is first
    assert reload_config() is not first
