"""Tests for configuration loading, saving and overrides."""

import json
import os
import logging

import pytest
import toml
import yaml

from rangelog.config import (
    apply_env_overrides,
    configure_logging,
    get_config_path,
    get_default_config,
    load_config,
    merge_configs,
    save_config,
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Isolated HOME with no RANGELOG_ variables."""
    for key in list(os.environ):
        if key.startswith('RANGELOG_'):
            monkeypatch.delenv(key)
    monkeypatch.setenv('HOME', str(tmp_path))
    return tmp_path


class TestConfigPath:
    """Tests for get_config_path."""

    def test_default_path(self, clean_env):
        """Test the default path when nothing exists."""
        assert get_config_path() == clean_env / '.rangelog' / 'config.json'

    def test_env_path(self, clean_env, monkeypatch):
        """Test RANGELOG_CONFIG wins when the file exists."""
        path = clean_env / 'custom.yaml'
        path.write_text("releases:\n  max_pages: 5\n")
        monkeypatch.setenv('RANGELOG_CONFIG', str(path))
        assert get_config_path() == path

    def test_finds_toml(self, clean_env):
        """Test other formats in ~/.rangelog are found."""
        config_dir = clean_env / '.rangelog'
        config_dir.mkdir()
        (config_dir / 'config.toml').write_text("[releases]\nmax_pages = 5\n")
        assert get_config_path() == config_dir / 'config.toml'


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults(self, clean_env):
        """Test defaults without any file."""
        assert load_config() == get_default_config()

    @pytest.mark.parametrize("filename, text", [
        ('config.json', json.dumps({"releases": {"max_pages": 5}})),
        ('config.toml', "[releases]\nmax_pages = 5\n"),
        ('config.yaml', "releases:\n  max_pages: 5\n"),
    ])
    def test_file_formats(self, clean_env, filename, text):
        """Test every format merges over the defaults."""
        config_dir = clean_env / '.rangelog'
        config_dir.mkdir()
        (config_dir / filename).write_text(text)

        config = load_config()
        assert config['releases']['max_pages'] == 5
        assert config['releases']['page_size'] == 30

    def test_broken_file_falls_back(self, clean_env, caplog):
        """Test an unreadable file logs an error and keeps defaults."""
        config_dir = clean_env / '.rangelog'
        config_dir.mkdir()
        (config_dir / 'config.json').write_text("{not json")

        with caplog.at_level(logging.ERROR, logger="rangelog"):
            config = load_config()

        assert config == get_default_config()
        assert "Error loading config" in caplog.text

    def test_env_override(self, clean_env, monkeypatch):
        """Test RANGELOG_ variables override file values."""
        monkeypatch.setenv('RANGELOG_RELEASES_MAX_PAGES', '200')
        monkeypatch.setenv('RANGELOG_GITHUB_TOKEN', 'secret')
        config = load_config()
        assert config['releases']['max_pages'] == 200
        assert config['github']['token'] == 'secret'


class TestSaveConfig:
    """Tests for save_config."""

    @pytest.mark.parametrize("suffix, reader", [
        ('.json', json.loads),
        ('.toml', toml.loads),
        ('.yaml', yaml.safe_load),
    ])
    def test_round_trip_formats(self, tmp_path, suffix, reader):
        """Test saving writes the chosen format."""
        path = tmp_path / 'nested' / f'config{suffix}'
        assert save_config(get_default_config(), path) == path
        assert reader(path.read_text())['releases']['max_pages'] == 100

    def test_unwritable(self, tmp_path):
        """Test an unwritable path returns None."""
        blocker = tmp_path / 'file'
        blocker.write_text("x")
        assert save_config({}, blocker / 'config.json') is None


class TestMergeAndOverrides:
    """Tests for merge_configs and apply_env_overrides."""

    def test_merge_nested(self):
        """Test nested dictionaries merge key by key."""
        merged = merge_configs(
            {"github": {"token": "", "rate_limit": {"max_retries": 3}}},
            {"github": {"rate_limit": {"max_retries": 5}}, "extra": 1},
        )
        assert merged == {"github": {"token": "", "rate_limit": {"max_retries": 5}}, "extra": 1}

    def test_typed_values(self, clean_env, monkeypatch):
        """Test booleans and integers are converted."""
        monkeypatch.setenv('RANGELOG_AGGREGATION_MAX_WORKERS', '4')
        monkeypatch.setenv('RANGELOG_GITHUB_RATE_LIMIT_BASE_DELAY_SECONDS', 'off')
        config = apply_env_overrides(get_default_config())
        assert config['aggregation']['max_workers'] == 4
        assert config['github']['rate_limit']['base_delay_seconds'] is False

    def test_unknown_keys_ignored(self, clean_env, monkeypatch):
        """Test variables that match no key change nothing."""
        monkeypatch.setenv('RANGELOG_NOPE_VALUE', '1')
        assert apply_env_overrides(get_default_config()) == get_default_config()


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_verbose(self):
        """Test verbose switches the rangelog logger to DEBUG."""
        configure_logging(get_default_config(), verbose=True)
        assert logging.getLogger("rangelog").level == logging.DEBUG
        configure_logging(get_default_config())
        assert logging.getLogger("rangelog").level == logging.INFO

    def test_level_from_config(self):
        """Test the configured level is applied."""
        config = get_default_config()
        config['logging']['level'] = 'warning'
        configure_logging(config)
        assert logging.getLogger("rangelog").level == logging.WARNING
        configure_logging(get_default_config())
