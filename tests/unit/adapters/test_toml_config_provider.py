"""Tests for TomlConfigProvider global/local cascade."""

import logging
from pathlib import Path

import pytest

from gitops.adapters.config.toml_config_provider import TomlConfigProvider
from gitops.domain.config import GitopsConfig


@pytest.fixture
def git_dir(tmp_path: Path) -> Path:
    path = tmp_path / "repo" / ".git"
    path.mkdir(parents=True)
    return path


def test_defaults_when_no_files(git_dir: Path) -> None:
    assert TomlConfigProvider().load(git_dir) == GitopsConfig.default()


def test_global_config_applied(isolated_global_config: Path) -> None:
    isolated_global_config.parent.mkdir(parents=True)
    isolated_global_config.write_text(
        '[identity]\nname = "Ada"\nemail = "ada@example.com"\n'
    )

    config = TomlConfigProvider().load()

    assert config.identity.name == "Ada"
    assert config.status.include_ignored is False


def test_local_overrides_global(isolated_global_config: Path, git_dir: Path) -> None:
    isolated_global_config.parent.mkdir(parents=True)
    isolated_global_config.write_text(
        '[display]\ncolor_scheme = "never"\n\n[clone]\nusername = "ada"\n'
    )
    (git_dir / "gitops.toml").write_text('[display]\ncolor_scheme = "always"\n')

    config = TomlConfigProvider().load(git_dir)

    assert config.display.color_scheme == "always"
    assert config.clone.username == "ada"


def test_local_ignored_without_git_dir(git_dir: Path) -> None:
    (git_dir / "gitops.toml").write_text("[status]\ninclude_ignored = true\n")

    assert TomlConfigProvider().load().status.include_ignored is False
    assert TomlConfigProvider().load(git_dir).status.include_ignored is True


def test_invalid_global_config_warns_and_falls_back(
    isolated_global_config: Path, caplog: pytest.LogCaptureFixture
) -> None:
    isolated_global_config.parent.mkdir(parents=True)
    isolated_global_config.write_text("[identity\nname = ")

    with caplog.at_level(logging.WARNING):
        config = TomlConfigProvider().load()

    assert config == GitopsConfig.default()
    assert "Failed to parse global config" in caplog.text


def test_invalid_local_values_keep_global(
    isolated_global_config: Path, git_dir: Path, caplog: pytest.LogCaptureFixture
) -> None:
    isolated_global_config.parent.mkdir(parents=True)
    isolated_global_config.write_text("[status]\ninclude_ignored = true\n")
    (git_dir / "gitops.toml").write_text('[display]\ncolor_scheme = "rainbow"\n')

    with caplog.at_level(logging.WARNING):
        config = TomlConfigProvider().load(git_dir)

    assert config.status.include_ignored is True
    assert config.display.color_scheme == "auto"
    assert "Using global/default configuration" in caplog.text
