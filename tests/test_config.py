import pytest

from krakenwrap.config.load import CONFIG_ENV_VAR, find_config, load_settings, read_config
from krakenwrap.errors import ConfigError


def test_shell_style_config(tmp_path, monkeypatch):
    monkeypatch.setenv("DBROOT", "/data")
    cfg = tmp_path / "config-metawrap"
    cfg.write_text(
        "#!/bin/bash\n"
        "# paths\n"
        "mw_path=$(which config-metawrap)\n"
        'SOFT="/opt/metawrap/scripts"\n'
        "export KRAKEN2_DB=${DBROOT}/kraken2  # built with kraken2-build\n"
        "BMTAGGER_DB=$KRAKEN2_DB/bmtagger\n"
    )
    data = read_config(cfg)
    assert data["SOFT"] == "/opt/metawrap/scripts"
    assert data["KRAKEN2_DB"] == "/data/kraken2"
    assert data["BMTAGGER_DB"] == "/data/kraken2/bmtagger"
    assert "mw_path" not in data


def test_yaml_config(tmp_path):
    cfg = tmp_path / "krakenwrap.yaml"
    cfg.write_text("KRAKEN2_DB: /db\nsoft: /scripts\nKTIMPORTTEXT: /opt/krona/bin/ktImportText\n")
    settings = load_settings(cfg)
    assert str(settings.kraken2_db) == "/db"
    assert str(settings.soft) == "/scripts"
    assert settings.kt_import_text_bin == "/opt/krona/bin/ktImportText"
    assert settings.kraken2_bin == "kraken2"


def test_incomplete_config(tmp_path):
    cfg = tmp_path / "cfg"
    cfg.write_text("SOFT=/scripts\n")
    with pytest.raises(ConfigError, match="KRAKEN2_DB"):
        load_settings(cfg)


def test_find_config_from_env(tmp_path, monkeypatch):
    cfg = tmp_path / "cfg"
    cfg.write_text("SOFT=/s\n")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(cfg))
    assert find_config() == cfg


def test_find_config_on_path(tmp_path, monkeypatch):
    cfg = tmp_path / "config-metawrap"
    cfg.write_text("SOFT=/s\n")
    cfg.chmod(0o755)
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.setenv("PATH", str(tmp_path))
    assert find_config() == cfg


def test_find_config_missing(tmp_path, monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.setenv("PATH", str(tmp_path))
    with pytest.raises(ConfigError, match="config-metawrap"):
        find_config()


def test_validate_paths_requires_helper_scripts(settings):
    settings.krona_script.unlink()
    with pytest.raises(ConfigError, match="kraken_to_krona.py"):
        settings.validate_paths()
