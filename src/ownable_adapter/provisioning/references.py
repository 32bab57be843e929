"""Dependency references and the roles they are resolved for.

A caller may hand the provisioner a dependency in three shapes: nothing at
all, a bare address, or a live instance. :func:`as_reference` lifts those
raw values into a closed tagged variant so normalization is a total match
over three cases instead of a chain of truthiness checks.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from ..addresses import to_address
from ..errors import ResolutionError
from ..protocols import LiveInstance


class Role(str, Enum):
    """What a reference stands for; selects the artifact used to attach."""

    TARGET = 'target'
    FACTORY = 'factory'
    ADAPTER = 'adapter'
    ACCESS_CONTROL = 'access_control'


@dataclass(frozen=True, slots=True)
class Absent:
    """No dependency given; deploy a fresh one where the role allows it."""


@dataclass(frozen=True, slots=True)
class AddressReference:
    """An existing contract known only by address."""

    address: str

    def __post_init__(self) -> None:
        object.__setattr__(self, 'address', to_address(self.address))


@dataclass(frozen=True, slots=True)
class InstanceReference:
    """An already-attached live instance; used as is."""

    instance: LiveInstance

    @property
    def address(self) -> str:
        return self.instance.address


Reference = Union[Absent, AddressReference, InstanceReference]

ABSENT = Absent()


def as_reference(value: object) -> Reference:
    """Lift a raw caller value into a :data:`Reference`.

    ``None`` -> :class:`Absent`, ``str`` -> :class:`AddressReference`,
    anything carrying an ``address`` attribute -> :class:`InstanceReference`.

    Raises:
        ResolutionError: For strings that are not addresses and for values
            of any other type.
    """
    if isinstance(value, (Absent, AddressReference, InstanceReference)):
        return value
    if value is None:
        return ABSENT
    if isinstance(value, str):
        return AddressReference(value)
    if isinstance(getattr(value, 'address', None), str):
        return InstanceReference(value)
    raise ResolutionError(
        f'cannot interpret {type(value).__name__} as a contract reference'
    )
