"""Selection of the reconcilers the controller manager enables."""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence


def parse_reconcilers(value: str) -> list[str]:
    """Split a comma separated list of reconciler names."""
    return value.split(",")


def reconciler_is_enabled(
    reconcilers: Sequence[str], name: str, environ: Mapping[str, str] | None = None
) -> bool:
    """Return whether a reconciler is enabled by the list or by ENABLE_<NAME>=true."""
    if "*" in reconcilers or name in reconcilers:
        return True
    env = os.environ if environ is None else environ
    return env.get(f"ENABLE_{name.upper()}") == "true"