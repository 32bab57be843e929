"""Address helpers shared by the ledger and the provisioning flow.

Addresses are opaque 20-byte identifiers rendered as ``0x`` + 40 hex
digits. The canonical form is lower-case so that comparisons never depend
on the checksum casing a caller happened to use.
"""

from __future__ import annotations

import hashlib
import re

from .errors import ResolutionError

ZERO_ADDRESS = '0x' + '0' * 40
_ADDRESS_RE = re.compile(r'^0x[0-9a-fA-F]{40}$')


def is_address(value: object) -> bool:
    """Return True if *value* is a well-formed address string."""
    return isinstance(value, str) and bool(_ADDRESS_RE.match(value.strip()))


def to_address(value: object, *, label: str = 'address') -> str:
    """Validate *value* and return its canonical lower-case form.

    Raises:
        ResolutionError: If *value* is not a well-formed address.
    """
    if not is_address(value):
        raise ResolutionError(f'{label} is not a valid address: {value!r}')
    return str(value).strip().lower()


def same_address(left: str | None, right: str | None) -> bool:
    """Case-insensitive address equality; ``None`` never matches."""
    if left is None or right is None:
        return False
    return left.lower() == right.lower()


def derive_address(*parts: object) -> str:
    """Derive a deterministic address from arbitrary seed parts."""
    seed = ':'.join(str(p) for p in parts).encode()
    return '0x' + hashlib.sha256(seed).hexdigest()[:40]
