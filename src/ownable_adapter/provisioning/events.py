"""Receipt event extraction.

The factory returns the new adapter's address only through an event, so
extraction is a typed "find first by name, project named fields" step with
an explicit failure instead of an unchecked lookup.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..addresses import is_address
from ..errors import EventExtractionError
from ..observability import get_logger
from ..protocols import EventLog, Receipt

logger = get_logger(__name__)

ADAPTER_DEPLOYED_EVENT = 'NewOwnableToAccessControlAdapterDeployed'


class AdapterDeployedEvent(BaseModel):
    """Projection of a ``NewOwnableToAccessControlAdapterDeployed`` event."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    adapter_address: str = Field(alias='adapterAddress')
    ownable_target_address: str = Field(alias='ownableTargetAddress')

    @field_validator('adapter_address', 'ownable_target_address')
    @classmethod
    def _canonical_address(cls, value: str) -> str:
        if not is_address(value):
            raise ValueError(f'not an address: {value!r}')
        return value.lower()


def find_events(receipt: Receipt, name: str) -> list[EventLog]:
    """Return all events named *name*, in emission order."""
    return [log for log in receipt.logs if log.name == name]


def find_event(receipt: Receipt, name: str) -> EventLog:
    """Return the first event named *name*.

    Raises:
        EventExtractionError: If the receipt has no such event.
    """
    matches = find_events(receipt, name)
    if not matches:
        raise EventExtractionError(
            f'{name} not found in receipt {receipt.tx_hash} '
            f'(events: {[log.name for log in receipt.logs]})'
        )
    if len(matches) > 1:
        logger.warning(
            'duplicate_events_in_receipt',
            event_name=name,
            count=len(matches),
            tx_hash=receipt.tx_hash,
        )
    return matches[0]


def extract_adapter_deployment(receipt: Receipt) -> AdapterDeployedEvent:
    """Extract the adapter deployment record from a factory minting receipt.

    Raises:
        EventExtractionError: If the event is missing or its arguments are
            not addresses.
    """
    log = find_event(receipt, ADAPTER_DEPLOYED_EVENT)
    try:
        return AdapterDeployedEvent.model_validate(dict(log.args))
    except ValidationError as exc:
        raise EventExtractionError(
            f'malformed {ADAPTER_DEPLOYED_EVENT} event in {receipt.tx_hash}: '
            f'{exc.error_count()} invalid field(s)'
        ) from exc
