"""Provisioner settings tests."""

from __future__ import annotations

import pytest

from ownable_adapter.settings import ProvisionerSettings


class TestDefaults:
    def test_default_target_token(self):
        s = ProvisionerSettings()
        assert s.token_artifact == 'TetherToken'
        assert s.token_initial_supply == 0
        assert s.token_decimals == 6
        assert s.ownable_artifact == 'contracts/AdapterFactory.sol:Ownable'
        assert s.verify_ownership is True

    def test_defaults_are_valid(self):
        assert ProvisionerSettings().validate() == []

    def test_frozen(self):
        with pytest.raises(AttributeError):
            ProvisionerSettings().token_name = 'x'


class TestValidate:
    def test_reports_every_problem(self):
        s = ProvisionerSettings(
            adapter_artifact=' ',
            token_initial_supply=-1,
            token_decimals=300,
            log_level='LOUD',
        )
        errors = s.validate()
        assert 'adapter_artifact must not be empty' in errors
        assert 'token_initial_supply must be >= 0' in errors
        assert 'token_decimals must be within 0..255' in errors
        assert any(e.startswith('log_level') for e in errors)


class TestFromEnv:
    def test_empty_env_gives_defaults(self):
        assert ProvisionerSettings.from_env({}) == ProvisionerSettings()

    def test_reads_prefixed_variables(self):
        s = ProvisionerSettings.from_env({
            'ADAPTER_PROVISIONER_TOKEN_ARTIFACT': 'MyToken',
            'ADAPTER_PROVISIONER_TOKEN_INITIAL_SUPPLY': '1000',
            'ADAPTER_PROVISIONER_TOKEN_DECIMALS': '18',
            'ADAPTER_PROVISIONER_VERIFY_OWNERSHIP': 'false',
            'ADAPTER_PROVISIONER_LOG_LEVEL': 'debug',
            'ADAPTER_PROVISIONER_LOG_FORMAT': 'console',
        })
        assert s.token_artifact == 'MyToken'
        assert s.token_initial_supply == 1000
        assert s.token_decimals == 18
        assert s.verify_ownership is False
        assert s.log_level == 'DEBUG'
        assert s.log_json is False

    def test_blank_values_fall_back_to_defaults(self):
        s = ProvisionerSettings.from_env({'ADAPTER_PROVISIONER_FACTORY_ARTIFACT': '  '})
        assert s.factory_artifact == 'AdapterFactory'

    def test_unprefixed_variables_ignored(self):
        s = ProvisionerSettings.from_env({'TOKEN_ARTIFACT': 'Other'})
        assert s.token_artifact == 'TetherToken'

    def test_non_integer_decimals_named_in_error(self):
        with pytest.raises(ValueError, match='ADAPTER_PROVISIONER_TOKEN_DECIMALS'):
            ProvisionerSettings.from_env({'ADAPTER_PROVISIONER_TOKEN_DECIMALS': 'six'})
