"""In-memory ledger and artifact registry for tests and local runs."""

from .contracts import (
    ADAPTER_DEPLOYED_EVENT,
    FULL_PRIVILEGES_MASK,
    ROLE_ACCESS_MANAGER,
    ROLE_ACCESS_ROLES_MANAGER,
    AccessControlMock,
    AdapterFactory,
    Contract,
    OwnableToAccessControlAdapter,
    Revert,
    TetherToken,
)
from .ledger import CallContext, InMemoryLedger
from .registry import (
    OWNABLE_INTERFACE_ARTIFACT,
    ArtifactSpec,
    ContractInstance,
    InMemoryArtifactHandle,
    InMemoryArtifactRegistry,
    default_artifacts,
)

__all__ = [
    'ADAPTER_DEPLOYED_EVENT',
    'FULL_PRIVILEGES_MASK',
    'OWNABLE_INTERFACE_ARTIFACT',
    'ROLE_ACCESS_MANAGER',
    'ROLE_ACCESS_ROLES_MANAGER',
    'AccessControlMock',
    'AdapterFactory',
    'ArtifactSpec',
    'CallContext',
    'Contract',
    'ContractInstance',
    'InMemoryArtifactHandle',
    'InMemoryArtifactRegistry',
    'InMemoryLedger',
    'OwnableToAccessControlAdapter',
    'Revert',
    'TetherToken',
    'default_artifacts',
]
