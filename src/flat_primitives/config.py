"""Taichi runtime configuration.

Intersection routines rely on IEEE comparison semantics for degenerate rays:
a NaN or infinite ray parameter must compare false against every bound so
that the primitive reports a miss. LLVM fast-math lets the compiler assume
there are no NaNs, so the runtime is initialised with ``fast_math=False``
unless explicitly overridden.

Example:
    >>> from flat_primitives.config import TaichiConfig, init_taichi
    >>> init_taichi(TaichiConfig(arch="cpu"))
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import taichi as ti

_ARCHES = {
    "cpu": ti.cpu,
    "gpu": ti.gpu,
    "cuda": ti.cuda,
    "vulkan": ti.vulkan,
    "metal": ti.metal,
}


@dataclass
class TaichiConfig:
    """Settings passed to ``ti.init``.

    Attributes:
        arch: Backend name, one of "cpu", "gpu", "cuda", "vulkan", "metal".
        fast_math: Whether to allow fast-math optimizations. Keep False so
            NaN/inf comparisons in the intersection code stay IEEE-correct.
        random_seed: Seed for Taichi's random number generator.
        debug: Enable Taichi debug mode (bounds checking, slower).
    """

    arch: str = "cpu"
    fast_math: bool = False
    random_seed: int = 0
    debug: bool = False

    def to_init_kwargs(self) -> dict[str, Any]:
        """Build the keyword arguments for ``ti.init``.

        Raises:
            ValueError: If ``arch`` is not a known backend name.
        """
        arch = _ARCHES.get(self.arch.lower())
        if arch is None:
            raise ValueError(
                f"Unknown Taichi arch: {self.arch!r}. Expected one of {sorted(_ARCHES)}"
            )
        return {
            "arch": arch,
            "fast_math": self.fast_math,
            "random_seed": self.random_seed,
            "debug": self.debug,
        }


def init_taichi(config: TaichiConfig | None = None) -> TaichiConfig:
    """Initialize the Taichi runtime.

    Args:
        config: Runtime settings. Defaults to ``TaichiConfig()``.

    Returns:
        The configuration that was applied.
    """
    if config is None:
        config = TaichiConfig()
    ti.init(**config.to_init_kwargs())
    return config
