"""MCMC sampling kernels."""

from mlx_pmmh.kernels.pseudo_marginal import (
    PMMHResult,
    pseudo_marginal_metropolis_hastings,
    run,
)

__all__ = ["PMMHResult", "pseudo_marginal_metropolis_hastings", "run"]
