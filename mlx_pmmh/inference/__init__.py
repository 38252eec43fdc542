"""High-level inference API."""

from mlx_pmmh.inference.pmmh import PMMH

__all__ = ["PMMH"]
