"""Tests for logger setup."""

import logging

import pytest

from imgcompare.logging import LOG_FORMAT, LOG_LEVEL_ENV, get_logger, resolve_level


class TestResolveLevel:
    def test_library_default_warning(self, monkeypatch):
        monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
        assert resolve_level("imgcompare.dedup.batch") == logging.WARNING

    def test_cli_default_info(self, monkeypatch):
        monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
        assert resolve_level("imgcompare.cli") == logging.INFO

    @pytest.mark.parametrize("value", ["DEBUG", "debug", " debug "])
    def test_environment_override(self, monkeypatch, value):
        monkeypatch.setenv(LOG_LEVEL_ENV, value)
        assert resolve_level("imgcompare.dedup.model") == logging.DEBUG
        assert resolve_level("imgcompare.cli") == logging.DEBUG

    def test_unknown_level_falls_back(self, monkeypatch):
        monkeypatch.setenv(LOG_LEVEL_ENV, "LOUD")
        assert resolve_level("imgcompare.dedup.model") == logging.WARNING
        assert resolve_level("imgcompare.cli") == logging.INFO


class TestGetLogger:
    def test_single_handler(self, monkeypatch):
        monkeypatch.setenv(LOG_LEVEL_ENV, "ERROR")
        name = "imgcompare.tests.single_handler"

        first = get_logger(name)
        second = get_logger(name)

        assert first is second
        assert len(first.handlers) == 1
        assert first.level == logging.ERROR
        assert first.handlers[0].formatter._fmt == LOG_FORMAT

    def test_level_fixed_at_first_call(self, monkeypatch):
        name = "imgcompare.tests.fixed_level"
        monkeypatch.setenv(LOG_LEVEL_ENV, "ERROR")
        get_logger(name)

        monkeypatch.setenv(LOG_LEVEL_ENV, "DEBUG")

        assert get_logger(name).level == logging.ERROR
