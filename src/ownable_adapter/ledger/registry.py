"""In-memory artifact registry and live contract instances.

``InMemoryArtifactRegistry`` implements :class:`ArtifactRegistry` over any
:class:`TransactionExecutor`. Each artifact knows its ABI (the function
names it exposes); an instance attached through an interface artifact such
as ``Ownable`` can only call that interface's functions, whatever contract
actually lives at the address.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..addresses import to_address
from ..errors import ArtifactNotFoundError, ResolutionError, SubmissionError
from ..protocols import Receipt, TransactionExecutor
from .contracts import DEFAULT_CONTRACTS, Contract, Ownable

OWNABLE_INTERFACE_ARTIFACT = 'contracts/AdapterFactory.sol:Ownable'


@dataclass(frozen=True, slots=True)
class ArtifactSpec:
    """Name, ABI and (optionally) deployable bytecode of an artifact."""

    name: str
    functions: frozenset[str]
    contract_name: str | None = None
    """Ledger contract to create on deploy; ``None`` for interfaces."""

    @property
    def abstract(self) -> bool:
        return self.contract_name is None

    @classmethod
    def for_contract(cls, contract: type[Contract], name: str | None = None) -> ArtifactSpec:
        return cls(
            name=name or contract.contract_name,
            functions=frozenset(contract.abi),
            contract_name=contract.contract_name,
        )

    @classmethod
    def interface(cls, name: str, contract: type[Contract]) -> ArtifactSpec:
        return cls(name=name, functions=frozenset(contract.abi))


class ContractInstance:
    """A live contract: an address plus an artifact's ABI."""

    def __init__(
        self,
        *,
        executor: TransactionExecutor,
        artifact: ArtifactSpec,
        address: str,
        deploy_receipt: Receipt | None = None,
    ) -> None:
        self._executor = executor
        self._artifact = artifact
        self._address = address
        self.deploy_receipt = deploy_receipt

    @property
    def address(self) -> str:
        return self._address

    @property
    def contract_name(self) -> str:
        return self._artifact.name

    def __repr__(self) -> str:
        return f'ContractInstance({self._artifact.name!r}, {self._address!r})'

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ContractInstance):
            return NotImplemented
        return self._address == other._address and self._artifact.name == other._artifact.name

    def __hash__(self) -> int:
        return hash((self._artifact.name, self._address))

    async def call(self, function: str, *args: Any) -> Any:
        self._check_abi(function)
        return await self._executor.call(self._address, function, args)

    async def transact(self, function: str, *args: Any, sender: str | None = None) -> Receipt:
        self._check_abi(function)
        return await self._executor.submit(self._address, function, args, sender)

    def _check_abi(self, function: str) -> None:
        if function not in self._artifact.functions:
            raise SubmissionError(
                f'{self._artifact.name} has no function {function!r}'
            )


class InMemoryArtifactHandle:
    def __init__(self, executor: TransactionExecutor, spec: ArtifactSpec) -> None:
        self._executor = executor
        self._spec = spec

    @property
    def name(self) -> str:
        return self._spec.name

    async def deploy(self, *args: Any, sender: str | None = None) -> ContractInstance:
        if self._spec.abstract:
            raise ResolutionError(f'artifact {self._spec.name!r} is abstract and cannot be deployed')
        receipt = await self._executor.create(self._spec.contract_name, args, sender)
        return ContractInstance(
            executor=self._executor,
            artifact=self._spec,
            address=receipt.contract_address,
            deploy_receipt=receipt,
        )

    async def attach(self, address: str) -> ContractInstance:
        address = to_address(address)
        if not self._executor.has_code(address):
            raise ResolutionError(
                f'cannot attach {self._spec.name!r}: no contract code at {address}'
            )
        return ContractInstance(executor=self._executor, artifact=self._spec, address=address)


class InMemoryArtifactRegistry:
    """Registry of the artifacts known to an executor."""

    def __init__(
        self,
        executor: TransactionExecutor,
        artifacts: tuple[ArtifactSpec, ...] | None = None,
    ) -> None:
        self._executor = executor
        if artifacts is None:
            artifacts = default_artifacts()
        self._artifacts = {a.name: a for a in artifacts}

    def register(self, spec: ArtifactSpec) -> None:
        self._artifacts[spec.name] = spec

    def resolve(self, name: str) -> InMemoryArtifactHandle:
        spec = self._artifacts.get(name)
        if spec is None:
            raise ArtifactNotFoundError(name)
        return InMemoryArtifactHandle(self._executor, spec)


def default_artifacts() -> tuple[ArtifactSpec, ...]:
    """Artifacts for the bundled contract models plus the Ownable interface."""
    return (
        *(ArtifactSpec.for_contract(c) for c in DEFAULT_CONTRACTS),
        ArtifactSpec.interface(OWNABLE_INTERFACE_ARTIFACT, Ownable),
    )
