"""Dependency resolution and ownership wiring for adapter deployments."""

from .events import (
    ADAPTER_DEPLOYED_EVENT,
    AdapterDeployedEvent,
    extract_adapter_deployment,
    find_event,
    find_events,
)
from .handshake import (
    BINDING_SEQUENCE,
    AdapterBinding,
    InvalidBindingTransition,
    OwnershipHandshake,
    create_unbound,
    mark_bound,
    mark_constructed,
    record_failure,
)
from .provisioner import (
    AdapterDeployment,
    AdapterProvisioner,
    FactoryAdapterDeployment,
)
from .references import (
    ABSENT,
    Absent,
    AddressReference,
    InstanceReference,
    Reference,
    Role,
    as_reference,
)
from .requests import DeploymentRequest

__all__ = [
    'ABSENT',
    'ADAPTER_DEPLOYED_EVENT',
    'Absent',
    'AdapterBinding',
    'AdapterDeployedEvent',
    'AdapterDeployment',
    'AdapterProvisioner',
    'AddressReference',
    'BINDING_SEQUENCE',
    'DeploymentRequest',
    'FactoryAdapterDeployment',
    'InstanceReference',
    'InvalidBindingTransition',
    'OwnershipHandshake',
    'Reference',
    'Role',
    'as_reference',
    'create_unbound',
    'extract_adapter_deployment',
    'find_event',
    'find_events',
    'mark_bound',
    'mark_constructed',
    'record_failure',
]
