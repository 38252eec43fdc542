"""Proposal distributions for the pseudo-marginal sampler."""

from mlx_pmmh.proposals.base import Proposal
from mlx_pmmh.proposals.random_walk import GaussianRandomWalk, LogNormalRandomWalk

__all__ = [
    "Proposal",
    "GaussianRandomWalk",
    "LogNormalRandomWalk",
]
