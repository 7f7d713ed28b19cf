"""Shared fixtures for the converter tests."""

import logging
import os
import shutil
import tempfile

import pytest
import yaml

_log_dir = None


def pytest_configure(config):
    # Loggers attach their file handler on import, so the directory has to be
    # chosen before any test module is collected
    global _log_dir
    _log_dir = tempfile.mkdtemp(prefix="vtt2lrc-logs-")
    os.environ["APP_LOG_DIR"] = _log_dir


def pytest_unconfigure(config):
    logging.shutdown()
    if _log_dir:
        shutil.rmtree(_log_dir, ignore_errors=True)


@pytest.fixture
def make_config(tmp_path):
    """Build a ConfigManager from a throwaway config.yml."""
    from src.ConfigManager import ConfigManager

    def _make(**overrides):
        data = {"work_dir": str(tmp_path), "show_progress": False}
        data.update(overrides)
        config_file = tmp_path / "config.yml"
        config_file.write_text(yaml.safe_dump(data), encoding="utf-8")
        return ConfigManager(str(config_file))

    return _make
