"""Random walk proposals."""

import mlx.core as mx

from mlx_pmmh.errors import InvalidParameter
from mlx_pmmh.proposals.base import Proposal


def _check_scale(scale):
    if not scale > 0:
        raise InvalidParameter(f"scale must be positive, got {scale!r}")
    return float(scale)


class GaussianRandomWalk(Proposal):
    """Gaussian random walk proposal.

    Draws candidates as:
        θ' = θ + ε, where ε ~ N(0, scale²I)

    The density is symmetric, q(θ' | θ) = q(θ | θ'), so the proposal terms
    cancel in the acceptance ratio.

    Parameters
    ----------
    scale : float
        Standard deviation of each step, must be positive
    key : mlx.core.array, optional
        Random key for drawing candidates

    Examples
    --------
    >>> walk = GaussianRandomWalk(0.5, key=mx.random.key(1))
    >>> proposal = walk(mx.array([0.0, 1.0]))
    >>> log_q = walk.log_prob(proposal, mx.array([0.0, 1.0]))
    """

    def __init__(self, scale, key=None):
        super().__init__(key)
        self.scale = _check_scale(scale)
        self._log_norm = -0.5 * mx.log(2 * mx.pi) - mx.log(mx.array(self.scale))

    def __call__(self, state):
        state = mx.array(state)
        noise = mx.random.normal(state.shape, key=self.next_key()) * self.scale
        return state + noise

    def log_prob(self, state, given):
        """
        Log density of a Gaussian step from ``given`` to ``state``.

        log q(x | y) = Σ_j [-0.5 * log(2π) - log(σ) - 0.5 * ((x_j - y_j) / σ)²]
        """
        z = (mx.array(state) - mx.array(given)) / self.scale
        return mx.sum(self._log_norm - 0.5 * z ** 2)

    def __repr__(self):
        return f"GaussianRandomWalk(scale={self.scale:.3f})"


class LogNormalRandomWalk(Proposal):
    """Multiplicative random walk for strictly positive states.

    Draws candidates as:
        θ' = θ * exp(ε), where ε ~ N(0, scale²I)

    The density is not symmetric:
        log q(θ' | θ) = Σ_j [log N(log θ'_j; log θ_j, scale) - log θ'_j]

    so the sampler's Hastings correction is required. Useful for rates,
    variances and other positive parameters.

    Parameters
    ----------
    scale : float
        Standard deviation of each step on the log scale, must be positive
    key : mlx.core.array, optional
        Random key for drawing candidates
    """

    def __init__(self, scale, key=None):
        super().__init__(key)
        self.scale = _check_scale(scale)
        self._log_norm = -0.5 * mx.log(2 * mx.pi) - mx.log(mx.array(self.scale))

    def __call__(self, state):
        state = mx.array(state)
        noise = mx.random.normal(state.shape, key=self.next_key()) * self.scale
        return state * mx.exp(noise)

    def log_prob(self, state, given):
        """
        Log density of a log-normal step from ``given`` to ``state``.

        Returns -∞ if any component of ``state`` is not positive.
        """
        state = mx.array(state)
        given = mx.array(given)
        positive = mx.all(state > 0)
        # Guard the logs, the -inf branch is selected below
        safe_state = mx.where(state > 0, state, mx.array(1.0))
        log_state = mx.log(safe_state)
        z = (log_state - mx.log(given)) / self.scale
        log_q = mx.sum(self._log_norm - 0.5 * z ** 2 - log_state)
        return mx.where(positive, log_q, mx.array(-mx.inf))

    def __repr__(self):
        return f"LogNormalRandomWalk(scale={self.scale:.3f})"
