"""Reference lifting and input normalization tests."""

from __future__ import annotations

import pytest

from ownable_adapter.errors import ResolutionError
from ownable_adapter.ledger import OWNABLE_INTERFACE_ARTIFACT
from ownable_adapter.provisioning import (
    ABSENT,
    Absent,
    AddressReference,
    InstanceReference,
    Role,
    as_reference,
)

ADDRESS = '0x52908400098527886E0F7030069857D2E4169EE7'


class _Instance:
    address = ADDRESS.lower()
    contract_name = 'Stub'


class TestAsReference:
    def test_none_is_absent(self):
        assert as_reference(None) is ABSENT
        assert isinstance(as_reference(None), Absent)

    def test_string_is_address_reference(self):
        ref = as_reference(ADDRESS)
        assert ref == AddressReference(ADDRESS.lower())
        assert ref.address == ADDRESS.lower()

    def test_object_with_address_is_instance_reference(self):
        instance = _Instance()
        ref = as_reference(instance)
        assert isinstance(ref, InstanceReference)
        assert ref.instance is instance
        assert ref.address == instance.address

    def test_existing_reference_passes_through(self):
        ref = AddressReference(ADDRESS)
        assert as_reference(ref) is ref

    def test_malformed_address_string(self):
        with pytest.raises(ResolutionError, match='not a valid address'):
            as_reference('tether')

    def test_unsupported_type(self):
        with pytest.raises(ResolutionError, match='cannot interpret int'):
            as_reference(12)


class TestNormalizeAbsent:
    @pytest.mark.asyncio
    async def test_absent_target_deploys_zero_supply_token(self, provisioner, ledger, deployer):
        target = await provisioner.normalize(None, role=Role.TARGET, deployer=deployer)

        assert ledger.contract_name_at(target.address) == 'TetherToken'
        assert await target.call('owner') == deployer
        assert await target.call('totalSupply') == 0

    @pytest.mark.asyncio
    async def test_absent_factory_deploys_factory(self, provisioner, ledger, deployer):
        factory = await provisioner.normalize(ABSENT, role=Role.FACTORY, deployer=deployer)

        assert ledger.contract_name_at(factory.address) == 'AdapterFactory'
        assert factory.deploy_receipt.sender == deployer

    @pytest.mark.asyncio
    async def test_absent_factory_without_deployer_uses_default_sender(self, provisioner, ledger):
        factory = await provisioner.normalize(None, role=Role.FACTORY, deployer=None)
        assert factory.deploy_receipt.sender == ledger.default_account

    @pytest.mark.asyncio
    async def test_absent_target_requires_deployer(self, provisioner):
        with pytest.raises(ResolutionError, match='deployer'):
            await provisioner.normalize(None, role=Role.TARGET, deployer=None)

    @pytest.mark.asyncio
    @pytest.mark.parametrize('role', [Role.ADAPTER, Role.ACCESS_CONTROL])
    async def test_absent_without_default_deployment(self, provisioner, deployer, role):
        with pytest.raises(ResolutionError, match='reference is required'):
            await provisioner.normalize(None, role=role, deployer=deployer)


class TestNormalizeAddress:
    @pytest.mark.asyncio
    async def test_attaches_without_deploying(self, provisioner, ledger, deployer):
        token = await provisioner.deploy_default_target(deployer)
        before = len(ledger.transactions)

        target = await provisioner.normalize(token.address.upper().replace('0X', '0x'),
                                             role=Role.TARGET, deployer=deployer)

        assert len(ledger.transactions) == before
        assert target.address == token.address
        assert target.contract_name == OWNABLE_INTERFACE_ARTIFACT

    @pytest.mark.asyncio
    async def test_attach_is_idempotent(self, provisioner, deployer):
        token = await provisioner.deploy_default_target(deployer)

        first = await provisioner.normalize(token.address, role=Role.TARGET, deployer=deployer)
        second = await provisioner.normalize(token.address, role=Role.TARGET, deployer=deployer)

        assert first.address == second.address
        assert first == second

    @pytest.mark.asyncio
    async def test_factory_role_uses_factory_artifact(self, provisioner, deployer):
        factory = await provisioner.deploy_factory(deployer)

        attached = await provisioner.normalize(factory.address, role=Role.FACTORY, deployer=deployer)

        assert attached.contract_name == 'AdapterFactory'

    @pytest.mark.asyncio
    async def test_address_without_code_fails(self, provisioner, deployer, stranger):
        with pytest.raises(ResolutionError, match='no contract code'):
            await provisioner.normalize(stranger, role=Role.TARGET, deployer=deployer)

    @pytest.mark.asyncio
    async def test_type_is_not_verified_beyond_attach(self, provisioner, deployer):
        factory = await provisioner.deploy_factory(deployer)

        target = await provisioner.normalize(factory.address, role=Role.TARGET, deployer=deployer)

        assert target.address == factory.address


class TestNormalizeInstance:
    @pytest.mark.asyncio
    async def test_instance_passes_through_unchanged(self, provisioner, ledger, deployer):
        token = await provisioner.deploy_default_target(deployer)
        before = len(ledger.transactions)

        target = await provisioner.normalize(token, role=Role.TARGET, deployer=deployer)

        assert target is token
        assert len(ledger.transactions) == before
