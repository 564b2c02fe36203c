"""Face descriptor decoding.

Descriptors reach the server in several shapes depending on how and when
they were stored: a list of numbers, its JSON text, JSON text encoded twice,
a list wrapped in a one-element list, or an index -> value mapping produced
by serializing a typed array.
"""

from __future__ import annotations

import json
import math
from typing import Any, Mapping, Sequence

import numpy as np


class DescriptorDecodeError(ValueError):
    """Raised when a stored or submitted descriptor has no usable numeric form."""


def _from_mapping(value: Mapping[Any, Any]) -> list[Any]:
    try:
        keys = sorted(value, key=lambda k: int(k))
    except (TypeError, ValueError):
        raise DescriptorDecodeError("Descriptor mapping keys must be integer indexes")
    return [value[k] for k in keys]


def normalize_descriptor(raw: Any) -> tuple[float, ...]:
    value = raw
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")

    # JSON text, possibly encoded twice.
    for _ in range(2):
        if not isinstance(value, str):
            break
        try:
            value = json.loads(value)
        except ValueError:
            raise DescriptorDecodeError("Descriptor is not valid JSON")

    if isinstance(value, np.ndarray):
        value = value.tolist()
    if isinstance(value, Mapping):
        value = _from_mapping(value)
    if isinstance(value, Sequence) and not isinstance(value, str) and len(value) == 1:
        inner = value[0]
        if isinstance(inner, (list, tuple, np.ndarray)):
            value = list(inner)

    if isinstance(value, str) or not isinstance(value, Sequence) or not value:
        raise DescriptorDecodeError("Descriptor must be a non-empty sequence of numbers")

    out: list[float] = []
    for item in value:
        if isinstance(item, bool):
            raise DescriptorDecodeError("Descriptor contains a non-numeric value")
        try:
            number = float(item)
        except (TypeError, ValueError):
            raise DescriptorDecodeError("Descriptor contains a non-numeric value")
        if not math.isfinite(number):
            raise DescriptorDecodeError("Descriptor contains a non-finite value")
        out.append(number)
    return tuple(out)


def descriptor_to_json(descriptor: Sequence[float]) -> str:
    """Storage form: plain JSON list."""
    return json.dumps([float(x) for x in descriptor])
