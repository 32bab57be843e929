"""Rehearsal CLI tests."""

from __future__ import annotations

import json
import logging
import os

import pytest
import structlog

from ownable_adapter import cli


@pytest.fixture(autouse=True)
def _reset_logging(monkeypatch):
    for key in list(os.environ):
        if key.startswith('ADAPTER_PROVISIONER_'):
            monkeypatch.delenv(key)
    yield
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()


def _summary(capsys) -> dict:
    out = capsys.readouterr().out
    start = out.index('{\n')
    return json.loads(out[start:])


class TestMain:
    def test_direct_rehearsal(self, capsys):
        assert cli.main(['--log-level', 'ERROR']) == 0

        summary = _summary(capsys)
        assert summary['target_owner'] == summary['adapter']
        assert summary['binding_state'] == 'bound'
        assert summary['transactions'] == 3
        assert 'factory' not in summary

    def test_factory_rehearsal_with_existing_target(self, capsys):
        assert cli.main(['--factory', '--existing-target', '--log-level', 'ERROR']) == 0

        summary = _summary(capsys)
        assert summary['target_owner'] == summary['adapter']
        assert summary['factory']
        assert summary['transactions'] == 4

    def test_invalid_config_exits_2(self, capsys, monkeypatch):
        monkeypatch.setenv('ADAPTER_PROVISIONER_TOKEN_INITIAL_SUPPLY', '-5')

        assert cli.main([]) == 2
        assert 'token_initial_supply' in capsys.readouterr().err

    def test_non_integer_setting_exits_2(self, capsys, monkeypatch):
        monkeypatch.setenv('ADAPTER_PROVISIONER_TOKEN_DECIMALS', 'six')

        assert cli.main([]) == 2
        assert 'TOKEN_DECIMALS must be an integer' in capsys.readouterr().err

    def test_provisioning_failure_exits_1(self, monkeypatch):
        monkeypatch.setenv('ADAPTER_PROVISIONER_FACTORY_ARTIFACT', 'Missing')

        assert cli.main(['--factory', '--log-level', 'ERROR']) == 1
