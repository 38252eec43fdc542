"""
MLX-PMMH: Pseudo-Marginal Metropolis-Hastings on MLX

Samples from a target density that can only be estimated: the log-density
function is a noisy, unbiased (on the density scale) Monte Carlo estimator,
as for latent-variable and simulation-based models. Reusing the estimate
of the current state keeps the exact target as the stationary distribution.

Example:
    >>> import mlx.core as mx
    >>> from mlx_pmmh import GaussianRandomWalk, run
    >>>
    >>> def log_density(theta, N):
    ...     return -0.5 * mx.sum(theta ** 2)
    >>>
    >>> walk = GaussianRandomWalk(0.5, key=mx.random.key(1))
    >>> trace = run(log_density, walk.log_prob, walk, [0.0],
    ...             1, 500, 1000, key=mx.random.key(0))
    >>> trace.shape
    (1000, 1)
"""

__version__ = "0.1.0"
__license__ = "MIT"

# Import core components
from mlx_pmmh.errors import (
    PMMHError,
    InvalidParameter,
    DimensionMismatch,
    NumericalDegenerate,
)
from mlx_pmmh.kernels.pseudo_marginal import (
    PMMHResult,
    pseudo_marginal_metropolis_hastings,
    run,
)
from mlx_pmmh.proposals import Proposal, GaussianRandomWalk, LogNormalRandomWalk
from mlx_pmmh.inference.pmmh import PMMH

__all__ = [
    "PMMHError",
    "InvalidParameter",
    "DimensionMismatch",
    "NumericalDegenerate",
    "PMMHResult",
    "pseudo_marginal_metropolis_hastings",
    "run",
    "Proposal",
    "GaussianRandomWalk",
    "LogNormalRandomWalk",
    "PMMH",
]
