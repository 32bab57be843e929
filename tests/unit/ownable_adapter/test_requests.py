"""Deployment request validation tests."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from ownable_adapter.provisioning import DeploymentRequest

DEPLOYER = '0x52908400098527886E0F7030069857D2E4169EE7'
TARGET = '0x' + 'ab' * 20


class TestDeploymentRequest:
    def test_canonicalizes_addresses(self):
        req = DeploymentRequest(deployer=DEPLOYER, target=TARGET.upper().replace('0X', '0x'))
        assert req.deployer == DEPLOYER.lower()
        assert req.target == TARGET
        assert req.factory is None
        assert req.use_factory is False

    def test_blank_optional_addresses_mean_absent(self):
        req = DeploymentRequest(deployer=DEPLOYER, factory='', target='   ')
        assert req.factory is None
        assert req.target is None

    def test_rejects_bad_deployer(self):
        with pytest.raises(ValidationError, match='deployer must be an address'):
            DeploymentRequest(deployer='alice')

    def test_rejects_bad_target(self):
        with pytest.raises(ValidationError, match='must be an address'):
            DeploymentRequest(deployer=DEPLOYER, target='0x1234')

    def test_frozen(self):
        req = DeploymentRequest(deployer=DEPLOYER)
        with pytest.raises(ValidationError):
            req.use_factory = True
