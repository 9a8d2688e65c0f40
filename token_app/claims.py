"""Claim representation and assembly from caller-supplied pairs."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, NamedTuple


class Claim(NamedTuple):
    """A single ``(type, value)`` assertion carried in a token payload."""

    type: str
    value: str


def _to_claim(entry: Any) -> Claim:
    if isinstance(entry, Claim):
        return entry
    if isinstance(entry, Mapping):
        try:
            return Claim(entry["type"], entry["value"])
        except KeyError as exc:
            raise ValueError(f"claim is missing the {exc.args[0]!r} field") from None
    if isinstance(entry, (str, bytes)):
        raise ValueError("claim must be a (type, value) pair")
    try:
        claim_type, claim_value = entry
    except (TypeError, ValueError):
        raise ValueError("claim must be a (type, value) pair") from None
    return Claim(claim_type, claim_value)


def assemble(claim_dtos: Iterable[Any]) -> list[Claim]:
    """
    Convert caller-supplied claim pairs into ``Claim`` values.

    Entries may be ``Claim`` instances, ``(type, value)`` pairs, or
    mappings with ``type`` and ``value`` keys.  Order is kept exactly and
    contents are not validated: empty strings, repeated types and non-ASCII
    text all pass through untouched.

    Raises:
        ValueError: If an entry is not shaped like a pair.
    """
    return [_to_claim(entry) for entry in claim_dtos]
