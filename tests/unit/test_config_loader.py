import pytest

from playlist_analyzer.config_loader import Config
from playlist_analyzer.exceptions import ConfigurationError


def test_environment_only(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config = Config(environ={"SPOTIFY_PLAYLIST_ID": "pl", "SPOTIFY_TOKEN": "tok"})

    config.require_spotify()
    assert config.spotify_playlist_id == "pl"
    assert config.audiodb_api_key == "1"
    assert config.enrichment_delay_seconds == 1.0
    assert config.spotify_page_size == 100
    assert config.deezer_limit == 2000
    assert config.fetch_tempo is False
    assert config.spotify_output_path == "spotify_playlist_analysis.csv"
    assert config.deezer_output_path == "deezer_playlist_analysis.csv"


@pytest.mark.parametrize("environ", [
    {"SPOTIFY_TOKEN": "tok"},
    {"SPOTIFY_PLAYLIST_ID": "pl"},
    {"SPOTIFY_PLAYLIST_ID": "pl", "SPOTIFY_TOKEN": "   "},
])
def test_spotify_requires_id_and_token(tmp_path, monkeypatch, environ):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(ConfigurationError):
        Config(environ=environ).require_spotify()


def test_deezer_requires_id(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(ConfigurationError):
        Config(environ={}).require_deezer()
    Config(environ={"DEEZER_PLAYLIST_ID": "908622995"}).require_deezer()


def test_yaml_values_and_env_precedence(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "deezer:\n"
        "  playlist_id: from-file\n"
        "  limit: 500\n"
        "theaudiodb:\n"
        "  api_key: file-key\n"
        "enrichment:\n"
        "  delay_seconds: 0.5\n"
        "  fetch_tempo: true\n",
        encoding="utf-8",
    )
    config = Config(str(path), environ={"DEEZER_PLAYLIST_ID": "from-env"})

    assert config.deezer_playlist_id == "from-env"
    assert config.deezer_limit == 500
    assert config.audiodb_api_key == "file-key"
    assert config.enrichment_delay_seconds == 0.5
    assert config.fetch_tempo is True

    assert Config(str(path), environ={"THEAUDIODB_API_KEY": "env-key"}).audiodb_api_key == "env-key"
    assert Config(str(path), environ={}).deezer_playlist_id == "from-file"


def test_explicit_missing_file(tmp_path):
    with pytest.raises(ConfigurationError):
        Config(str(tmp_path / "missing.yaml"), environ={})


def test_invalid_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        Config(str(path), environ={})


@pytest.mark.parametrize("yaml_text", [
    "enrichment:\n  delay_seconds: fast\n",
    "enrichment:\n  delay_seconds: -1\n",
    "enrichment:\n  delay_seconds: .nan\n",
    "spotify:\n  page_size: 0\n",
    "deezer:\n  limit: many\n",
    "http:\n  timeout: 0\n",
    "http:\n  timeout: true\n",
])
def test_bad_numeric_setting_is_a_configuration_error(tmp_path, yaml_text):
    path = tmp_path / "config.yaml"
    path.write_text(yaml_text, encoding="utf-8")
    config = Config(str(path), environ={"DEEZER_PLAYLIST_ID": "908622995"})

    with pytest.raises(ConfigurationError) as excinfo:
        config.require_deezer()
    assert "must be" in str(excinfo.value)


def test_delay_override(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config = Config(environ={})

    config.delay_override = 0
    assert config.enrichment_delay_seconds == 0.0

    config.delay_override = -1
    with pytest.raises(ConfigurationError) as excinfo:
        config.enrichment_delay_seconds
    assert "--delay" in str(excinfo.value)

    config.delay_override = float("inf")
    with pytest.raises(ConfigurationError):
        config.validate()
