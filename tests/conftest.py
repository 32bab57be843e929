"""Pytest configuration for ownable_adapter tests."""
import sys
from pathlib import Path

# Add src/ to path for src-layout imports
_SRC = Path(__file__).parent.parent / 'src'
if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))

import pytest

from ownable_adapter.ledger import InMemoryArtifactRegistry, InMemoryLedger
from ownable_adapter.provisioning import AdapterProvisioner
from ownable_adapter.settings import ProvisionerSettings


@pytest.fixture
def ledger():
    """A fresh in-memory ledger with deterministic accounts."""
    return InMemoryLedger()


@pytest.fixture
def registry(ledger):
    return InMemoryArtifactRegistry(ledger)


@pytest.fixture
def settings():
    return ProvisionerSettings()


@pytest.fixture
def provisioner(registry, settings):
    return AdapterProvisioner(registry=registry, settings=settings)


@pytest.fixture
def deployer(ledger):
    """Deployer distinct from the ledger's default sender."""
    return ledger.accounts[1]


@pytest.fixture
def stranger(ledger):
    return ledger.accounts[2]
