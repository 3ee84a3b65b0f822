from pathlib import Path
import textwrap

import pytest

from routeaudit.config import CheckConfig, ConfigError, load_config, merge_overrides


def write_pyproject(root: Path, body: str) -> None:
    (root / "pyproject.toml").write_text(textwrap.dedent(body), encoding="utf-8")


def test_defaults_without_pyproject(tmp_path: Path):
    cfg = load_config(tmp_path)
    assert cfg == CheckConfig()
    assert cfg.workers == 4
    assert cfg.fail_on_diagnostic is True


def test_defaults_without_tool_table(tmp_path: Path):
    write_pyproject(tmp_path, '[project]\nname = "client"\n')
    assert load_config(tmp_path) == CheckConfig()


def test_load_tool_table(tmp_path: Path):
    write_pyproject(
        tmp_path,
        """
        [tool.routeaudit]
        exclude = ["generated"]
        ignore = ["RA001"]
        workers = 2
        fail_on_diagnostic = false
        """,
    )
    cfg = load_config(tmp_path)
    assert cfg.exclude == ["generated"]
    assert cfg.ignore == ["RA001"]
    assert cfg.workers == 2
    assert cfg.fail_on_diagnostic is False


def test_load_config_for_a_file_uses_its_directory(tmp_path: Path):
    write_pyproject(tmp_path, "[tool.routeaudit]\nworkers = 1\n")
    f = tmp_path / "client.py"
    f.write_text("", encoding="utf-8")
    assert load_config(f).workers == 1


def test_unknown_keys_and_rules_are_rejected(tmp_path: Path):
    write_pyproject(tmp_path, "[tool.routeaudit]\nwrokers = 2\n")
    with pytest.raises(ConfigError, match="wrokers"):
        load_config(tmp_path)

    write_pyproject(tmp_path, '[tool.routeaudit]\nignore = ["RA999"]\n')
    with pytest.raises(ConfigError, match="RA999"):
        load_config(tmp_path)

    write_pyproject(tmp_path, "[tool.routeaudit]\nworkers = 0\n")
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_broken_toml_is_a_config_error(tmp_path: Path):
    write_pyproject(tmp_path, "[tool.routeaudit\n")
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_merge_overrides():
    base = CheckConfig(ignore=["RA001"], workers=3)
    merged = merge_overrides(base, workers=None, ignore=["RA002"], fail_on_diagnostic=False)
    assert merged.workers == 3
    assert merged.ignore == ["RA001", "RA002"]
    assert merged.fail_on_diagnostic is False

    with pytest.raises(ConfigError):
        merge_overrides(base, workers=0)
