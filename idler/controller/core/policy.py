"""
Idle-detection policy.

Functions opt in to scale-to-zero with a label; a function is idle when its
invocation rate over the inactivity window is exactly zero.
"""

from typing import Mapping, Optional

SCALE_LABEL = "com.openfaas.scale.zero"

_OPT_IN_VALUES = ("1", "true")


def is_scale_candidate(labels: Optional[Mapping[str, str]]) -> bool:
    if not labels:
        return False
    return labels.get(SCALE_LABEL) in _OPT_IN_VALUES


def is_idle(value: float) -> bool:
    # Exact comparison: no threshold and no hysteresis.
    return value == 0.0
