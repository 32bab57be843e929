"""Provisioning of Ownable targets, access-control adapters and adapter factories."""

from .errors import (
    ArtifactNotFoundError,
    EventExtractionError,
    HandshakeError,
    ProvisioningError,
    ResolutionError,
    SubmissionError,
    TransactionRevertedError,
)
from .provisioning import (
    AdapterDeployment,
    AdapterProvisioner,
    DeploymentRequest,
    FactoryAdapterDeployment,
    Role,
)
from .settings import ProvisionerSettings

__all__ = [
    'AdapterDeployment',
    'AdapterProvisioner',
    'ArtifactNotFoundError',
    'DeploymentRequest',
    'EventExtractionError',
    'FactoryAdapterDeployment',
    'HandshakeError',
    'ProvisionerSettings',
    'ProvisioningError',
    'ResolutionError',
    'Role',
    'SubmissionError',
    'TransactionRevertedError',
]
