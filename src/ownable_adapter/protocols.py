"""Collaborator protocols for dependency injection.

The provisioner never talks to a ledger directly. It resolves artifacts
through an :class:`ArtifactRegistry` and drives live contracts whose calls
are carried out by a :class:`TransactionExecutor`. The in-memory ledger in
:mod:`ownable_adapter.ledger` satisfies all of these; an RPC-backed client
can be dropped in without touching the orchestration code.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class EventLog:
    """One event emitted during a transaction."""

    name: str
    args: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    address: str | None = None
    """Address of the emitting contract."""


@dataclass(frozen=True, slots=True)
class Receipt:
    """Confirmation of a submitted transaction."""

    tx_hash: str
    sender: str
    function: str
    logs: tuple[EventLog, ...] = ()
    contract_address: str | None = None
    """Set when the transaction created a contract."""
    block_number: int = 0


@runtime_checkable
class LiveInstance(Protocol):
    """A contract bound to an address with callable operations."""

    @property
    def address(self) -> str: ...

    @property
    def contract_name(self) -> str: ...

    async def call(self, function: str, *args: Any) -> Any: ...
    async def transact(self, function: str, *args: Any, sender: str | None = None) -> Receipt: ...


@runtime_checkable
class ArtifactHandle(Protocol):
    """A resolved contract artifact."""

    @property
    def name(self) -> str: ...

    async def deploy(self, *args: Any, sender: str | None = None) -> LiveInstance: ...
    async def attach(self, address: str) -> LiveInstance: ...


@runtime_checkable
class ArtifactRegistry(Protocol):
    """Resolve contract artifacts by name."""

    def resolve(self, name: str) -> ArtifactHandle: ...


@runtime_checkable
class TransactionExecutor(Protocol):
    """Submit transactions and read-only calls against a ledger."""

    async def create(
        self, contract_name: str, args: tuple[Any, ...], sender: str | None,
    ) -> Receipt: ...
    async def submit(
        self,
        contract_address: str,
        function: str,
        args: tuple[Any, ...],
        sender: str | None,
    ) -> Receipt: ...
    async def call(
        self, contract_address: str, function: str, args: tuple[Any, ...],
    ) -> Any: ...
    def has_code(self, address: str) -> bool: ...
