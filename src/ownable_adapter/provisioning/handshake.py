"""Ownership handshake between an Ownable target and its adapter.

Implements the binding flow for one (target, adapter) pair:
  unbound -> constructed -> bound

``constructed`` is entered when the adapter exists and knows the target;
it needs the adapter's address, so the transfer can never be attempted
before construction. ``bound`` is entered once the target's owner slot
holds the adapter. There is no backward transition: a failed transfer
leaves the pair ``constructed`` and the same binding can be completed again.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from types import MappingProxyType

from ..addresses import same_address, to_address
from ..errors import HandshakeError, ProvisioningError
from ..observability import get_logger
from ..protocols import LiveInstance, Receipt

logger = get_logger(__name__)

BINDING_SEQUENCE = ('unbound', 'constructed', 'bound')

ALLOWED_TRANSITIONS = MappingProxyType(
    {
        'unbound': frozenset({'constructed'}),
        'constructed': frozenset({'bound'}),
        'bound': frozenset(),
    }
)

OWNERSHIP_MISMATCH_CODE = 'ownership_mismatch'


@dataclass(frozen=True, slots=True)
class AdapterBinding:
    """State snapshot of one (target, adapter) pair."""

    target_address: str
    adapter_address: str | None = None
    state: str = 'unbound'
    attempts: int = 0
    transfer_tx_hash: str | None = None
    last_error_code: str | None = None
    last_error_detail: str | None = None

    @property
    def is_bound(self) -> bool:
        return self.state == 'bound'


class InvalidBindingTransition(ValueError):
    """Raised for invalid binding state transitions."""

    def __init__(self, from_state: str, to_state: str) -> None:
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f'invalid binding transition: {from_state!r} -> {to_state!r}'
        )


def create_unbound(target_address: str) -> AdapterBinding:
    """Start tracking a target that has no adapter yet."""
    return AdapterBinding(target_address=to_address(target_address, label='target'))


def mark_constructed(binding: AdapterBinding, *, adapter_address: str) -> AdapterBinding:
    """Record that the adapter exists and references the target."""
    _check(binding, 'constructed')
    return replace(
        binding,
        state='constructed',
        adapter_address=to_address(adapter_address, label='adapter'),
    )


def mark_bound(binding: AdapterBinding, *, tx_hash: str) -> AdapterBinding:
    """Record that the target's ownership now sits with the adapter."""
    _check(binding, 'bound')
    return replace(
        binding,
        state='bound',
        transfer_tx_hash=tx_hash,
        last_error_code=None,
        last_error_detail=None,
    )


def record_failure(binding: AdapterBinding, *, error_code: str, error_detail: str) -> AdapterBinding:
    """Keep the binding ``constructed`` and remember why the transfer failed."""
    if binding.state != 'constructed':
        raise InvalidBindingTransition(binding.state, 'constructed')
    return replace(binding, last_error_code=error_code, last_error_detail=error_detail)


def _check(binding: AdapterBinding, to_state: str) -> None:
    allowed = ALLOWED_TRANSITIONS.get(binding.state, frozenset())
    if to_state not in allowed:
        raise InvalidBindingTransition(binding.state, to_state)


class OwnershipHandshake:
    """Hands a target's ownership to its already constructed adapter."""

    def __init__(self, *, verify_ownership: bool = True) -> None:
        self._verify = verify_ownership

    async def bind(
        self,
        target: LiveInstance,
        adapter: LiveInstance,
        deployer: str,
    ) -> AdapterBinding:
        """Run the full handshake for a freshly constructed adapter."""
        binding = mark_constructed(
            create_unbound(target.address), adapter_address=adapter.address,
        )
        return await self.complete(binding, target, deployer)

    async def complete(
        self,
        binding: AdapterBinding,
        target: LiveInstance,
        deployer: str,
    ) -> AdapterBinding:
        """Transfer ownership for a ``constructed`` binding.

        Safe to call again with the binding carried by a previous
        :class:`HandshakeError`, as long as *deployer* still owns the target.

        Raises:
            InvalidBindingTransition: If the binding is not ``constructed``.
            HandshakeError: If the transfer is rejected or ownership did not
                land on the adapter.
        """
        if binding.state != 'constructed':
            raise InvalidBindingTransition(binding.state, 'bound')
        if not same_address(binding.target_address, target.address):
            raise ValueError(
                f'binding tracks target {binding.target_address}, got {target.address}'
            )

        binding = replace(binding, attempts=binding.attempts + 1)
        try:
            receipt = await target.transact(
                'transferOwnership', binding.adapter_address, sender=deployer,
            )
        except ProvisioningError as exc:
            raise self._failed(binding, exc.code, str(exc)) from exc

        if self._verify:
            await self._verify_owner(binding, target, receipt)

        bound = mark_bound(binding, tx_hash=receipt.tx_hash)
        logger.info(
            'ownership_transferred',
            target=bound.target_address,
            adapter=bound.adapter_address,
            tx_hash=receipt.tx_hash,
            attempts=bound.attempts,
        )
        return bound

    async def _verify_owner(
        self,
        binding: AdapterBinding,
        target: LiveInstance,
        receipt: Receipt,
    ) -> None:
        try:
            owner = await target.call('owner')
        except ProvisioningError as exc:
            raise self._failed(binding, exc.code, str(exc)) from exc
        if not same_address(owner, binding.adapter_address):
            raise self._failed(
                binding,
                OWNERSHIP_MISMATCH_CODE,
                f'owner after {receipt.tx_hash} is {owner}, '
                f'expected adapter {binding.adapter_address}',
            )

    def _failed(self, binding: AdapterBinding, code: str, detail: str) -> HandshakeError:
        failed = record_failure(binding, error_code=code, error_detail=detail)
        logger.warning(
            'handshake_failed',
            target=failed.target_address,
            adapter=failed.adapter_address,
            attempts=failed.attempts,
            error_code=code,
            error_detail=detail,
        )
        return HandshakeError(
            f'ownership handshake failed for target {failed.target_address}: {detail}',
            binding=failed,
        )
