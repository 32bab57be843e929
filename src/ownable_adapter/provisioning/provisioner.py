"""Adapter provisioner: resolves dependencies and wires adapters to targets.

Orchestrates two flows, each a strictly ordered chain of awaited
submissions:

  direct:   normalize target -> deploy adapter -> handshake
  factory:  normalize factory -> normalize target -> mint adapter
            -> extract event -> attach adapter -> handshake

Every failure propagates immediately. Nothing already deployed is cleaned
up and nothing is retried; the caller re-invokes from scratch, or resumes a
failed handshake with the binding carried by :class:`HandshakeError`.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..addresses import same_address, to_address
from ..errors import EventExtractionError, ResolutionError
from ..observability import deployment_context, get_logger
from ..protocols import ArtifactHandle, ArtifactRegistry, LiveInstance, Receipt
from ..settings import ProvisionerSettings
from .events import AdapterDeployedEvent, extract_adapter_deployment
from .handshake import AdapterBinding, OwnershipHandshake
from .references import (
    AddressReference,
    InstanceReference,
    Role,
    as_reference,
)
from .requests import DeploymentRequest

logger = get_logger(__name__)

MINT_FUNCTION = 'deployNewOwnableToAccessControlAdapter'


# ── Result bundles ───────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class AdapterDeployment:
    """Target and the adapter that now owns it."""

    target: LiveInstance
    adapter: LiveInstance
    binding: AdapterBinding


@dataclass(frozen=True, slots=True)
class FactoryAdapterDeployment:
    """Factory, target and the adapter the factory minted for it."""

    factory: LiveInstance
    target: LiveInstance
    adapter: LiveInstance
    binding: AdapterBinding
    event: AdapterDeployedEvent
    receipt: Receipt


# ── Provisioner ──────────────────────────────────────────────────────


class AdapterProvisioner:
    """Deploys or reuses targets, factories and adapters.

    Artifacts are resolved through the injected registry; every call on a
    live instance goes through that registry's transaction executor.
    """

    def __init__(
        self,
        *,
        registry: ArtifactRegistry,
        settings: ProvisionerSettings | None = None,
        handshake: OwnershipHandshake | None = None,
    ) -> None:
        self._registry = registry
        self._settings = settings or ProvisionerSettings()
        self._handshake = handshake or OwnershipHandshake(
            verify_ownership=self._settings.verify_ownership,
        )

    @property
    def settings(self) -> ProvisionerSettings:
        return self._settings

    # ── Input normalization ─────────────────────────────────────────

    async def normalize(
        self,
        reference: object,
        *,
        role: Role,
        deployer: str | None,
    ) -> LiveInstance:
        """Turn a reference into a live instance for *role*.

        Absent targets and factories are deployed by *deployer*; addresses
        are attached with the role's artifact; instances pass through.

        Raises:
            ResolutionError: If the reference cannot be interpreted, the
                address has no code, or the role has no default deployment.
            SubmissionError: If a deployment is rejected.
        """
        ref = as_reference(reference)
        if isinstance(ref, InstanceReference):
            return ref.instance
        if isinstance(ref, AddressReference):
            instance = await self._artifact_for(role).attach(ref.address)
            logger.debug('reference_attached', role=role.value, address=instance.address)
            return instance

        if role is Role.TARGET:
            return await self.deploy_default_target(deployer)
        if role is Role.FACTORY:
            return await self.deploy_factory(deployer)
        raise ResolutionError(f'{role.value} reference is required')

    # ── Single-contract helpers ─────────────────────────────────────

    async def deploy_default_target(
        self,
        deployer: str | None,
        holder: str | None = None,
    ) -> LiveInstance:
        """Deploy the default Ownable target token, owned by *deployer*.

        When *holder* differs from the deployer the initial supply is
        transferred to it.
        """
        deployer = to_address(deployer, label='deployer')
        if holder is not None:
            holder = to_address(holder, label='holder')
        s = self._settings
        token = await self._registry.resolve(s.token_artifact).deploy(
            s.token_initial_supply,
            s.token_name,
            s.token_symbol,
            s.token_decimals,
            sender=deployer,
        )
        logger.info(
            'target_deployed',
            target=token.address,
            owner=deployer,
            initial_supply=s.token_initial_supply,
        )

        if holder is not None and holder != deployer:
            await token.transact('transfer', holder, s.token_initial_supply, sender=deployer)
            logger.info('initial_supply_moved', target=token.address, holder=holder)
        return token

    async def deploy_access_control(self, deployer: str) -> LiveInstance:
        """Deploy an access-control contract with *deployer* as super admin."""
        deployer = to_address(deployer, label='deployer')
        instance = await self._registry.resolve(self._settings.access_control_artifact).deploy(
            deployer, sender=deployer,
        )
        logger.info('access_control_deployed', address=instance.address, admin=deployer)
        return instance

    async def deploy_factory(self, deployer: str | None = None) -> LiveInstance:
        """Deploy an adapter factory; without a deployer the executor's default sender is used."""
        if deployer is not None:
            deployer = to_address(deployer, label='deployer')
        factory = await self._registry.resolve(self._settings.factory_artifact).deploy(
            sender=deployer,
        )
        logger.info('factory_deployed', factory=factory.address, deployer=deployer)
        return factory

    async def deploy_adapter(self, deployer: str, target: object) -> LiveInstance:
        """Deploy an adapter for an existing target, without the handshake.

        *target* may be an address or a live instance. The adapter is left
        ``constructed``: it does not own the target yet.
        """
        deployer = to_address(deployer, label='deployer')
        ref = as_reference(target)
        if not isinstance(ref, (AddressReference, InstanceReference)):
            raise ResolutionError('target reference is required')
        adapter = await self._registry.resolve(self._settings.adapter_artifact).deploy(
            ref.address, deployer, sender=deployer,
        )
        logger.info('adapter_deployed', adapter=adapter.address, target=ref.address)
        return adapter

    # ── Orchestration ───────────────────────────────────────────────

    async def deploy_ownable_to_adapter(
        self,
        deployer: str,
        target: object = None,
    ) -> AdapterDeployment:
        """Deploy an adapter for *target* and hand it the target's ownership.

        Deploys a default target when *target* is absent. *deployer* must
        own the target.
        """
        with deployment_context():
            deployer = to_address(deployer, label='deployer')
            target_instance = await self.normalize(target, role=Role.TARGET, deployer=deployer)
            adapter = await self.deploy_adapter(deployer, target_instance)
            binding = await self._handshake.bind(target_instance, adapter, deployer)
            return AdapterDeployment(target=target_instance, adapter=adapter, binding=binding)

    async def deploy_adapter_via_factory(
        self,
        deployer: str,
        factory: object = None,
        target: object = None,
    ) -> FactoryAdapterDeployment:
        """Mint an adapter for *target* through a factory and bind it.

        Deploys the factory and/or a default target when absent.

        Raises:
            EventExtractionError: If the minting receipt has no deployment
                event or the event names a different target.
        """
        with deployment_context():
            deployer = to_address(deployer, label='deployer')
            factory_instance = await self.normalize(factory, role=Role.FACTORY, deployer=deployer)
            target_instance = await self.normalize(target, role=Role.TARGET, deployer=deployer)

            receipt = await factory_instance.transact(
                MINT_FUNCTION, target_instance.address, sender=deployer,
            )
            event = extract_adapter_deployment(receipt)
            if not same_address(event.ownable_target_address, target_instance.address):
                raise EventExtractionError(
                    f'factory reported target {event.ownable_target_address}, '
                    f'expected {target_instance.address}'
                )
            logger.info(
                'adapter_event_extracted',
                factory=factory_instance.address,
                adapter=event.adapter_address,
                target=event.ownable_target_address,
                tx_hash=receipt.tx_hash,
            )

            adapter = await self._artifact_for(Role.ADAPTER).attach(event.adapter_address)
            binding = await self._handshake.bind(target_instance, adapter, deployer)
            return FactoryAdapterDeployment(
                factory=factory_instance,
                target=target_instance,
                adapter=adapter,
                binding=binding,
                event=event,
                receipt=receipt,
            )

    async def provision(
        self,
        request: DeploymentRequest,
    ) -> AdapterDeployment | FactoryAdapterDeployment:
        """Run the flow a validated request asks for."""
        if request.use_factory or request.factory is not None:
            return await self.deploy_adapter_via_factory(
                request.deployer, request.factory, request.target,
            )
        return await self.deploy_ownable_to_adapter(request.deployer, request.target)

    def _artifact_for(self, role: Role) -> ArtifactHandle:
        s = self._settings
        names = {
            Role.TARGET: s.ownable_artifact,
            Role.FACTORY: s.factory_artifact,
            Role.ADAPTER: s.adapter_artifact,
            Role.ACCESS_CONTROL: s.access_control_artifact,
        }
        return self._registry.resolve(names[role])
