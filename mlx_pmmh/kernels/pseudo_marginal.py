"""Pseudo-marginal Metropolis-Hastings MCMC sampler."""

import math
from typing import Callable, NamedTuple, Optional

import mlx.core as mx
import numpy as np

from mlx_pmmh.errors import DimensionMismatch, InvalidParameter, NumericalDegenerate


NAN_POLICIES = ("reject", "raise")


class PMMHResult(NamedTuple):
    """Output of a pseudo-marginal run.

    Attributes
    ----------
    samples : mlx.core.array
        Trace of shape ``(n, m)``. ``samples[i]`` is the chain state at the
        i-th retained iteration and ``samples[:, j]`` is the trace of the
        j-th dimension.
    log_densities : numpy.ndarray
        Retained log-density estimate paired with each row of ``samples``,
        in float64 so each value equals the estimator output exactly.
    acceptance_rate : float
        Fraction of transitions (burn-in included) that were accepted.
    """

    samples: mx.array
    log_densities: np.ndarray
    acceptance_rate: float


def _check_count(name, value, minimum):
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidParameter(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise InvalidParameter(f"{name} must be >= {minimum}, got {value}")
    return int(value)


def _as_state(value, dim):
    state = mx.array(value).astype(mx.float32)
    if tuple(state.shape) != (dim,):
        raise DimensionMismatch(
            f"proposal has shape {tuple(state.shape)}, expected ({dim},)"
        )
    return state


def _as_log_density(value, name):
    # np.asarray keeps float64 Python values exact
    arr = np.asarray(value)
    if arr.size != 1:
        raise DimensionMismatch(
            f"{name} must return a single value, got shape {arr.shape}"
        )
    return float(arr.reshape(-1)[0])


def pseudo_marginal_metropolis_hastings(
    log_density_estimator: Callable,
    log_proposal_density: Callable,
    propose: Callable,
    initial_state,
    num_estimator_samples: int,
    num_burnin: int,
    num_samples: int,
    key: Optional[mx.array] = None,
    nan_policy: str = "reject",
    verbose: bool = False,
) -> PMMHResult:
    """
    Pseudo-marginal Metropolis-Hastings MCMC sampler.

    The target density pi(theta) is only available through an unbiased,
    non-negative estimator. The estimate attached to the current state is
    kept until a proposal is accepted and is never recomputed, which keeps
    pi(theta) as the exact stationary distribution of the chain.

    Iterations are numbered ``1 .. num_burnin + num_samples``. Iteration 1
    is the initial state; each later iteration performs one transition::

        log_alpha = min(0, log_pi(theta') + log_q(theta | theta')
                           - log_pi(theta) - log_q(theta' | theta))

    and iterations after ``num_burnin`` are kept. With ``num_burnin=0``
    the first row of the trace is therefore ``initial_state``.

    Parameters
    ----------
    log_density_estimator : callable
        ``log_density_estimator(state, N)`` returns a noisy estimate of
        ``log pi(state)`` up to a constant. May return ``-inf``.
    log_proposal_density : callable
        ``log_proposal_density(x, given)`` returns ``log q(x | given)``,
        the log density of proposing ``x`` from ``given``.
    propose : callable
        ``propose(state)`` draws a new state of the same shape.
    initial_state : array_like
        Starting point of the chain, a non-empty 1-D vector of length m.
        States are stored as float32, MLX's default, so float64 input and
        float64 proposals are rounded.
    num_estimator_samples : int
        Monte Carlo effort N passed through to the estimator (> 0).
    num_burnin : int
        Number of initial iterations to discard (>= 0).
    num_samples : int
        Number of iterations to keep (> 0).
    key : mlx.core.array, optional
        Random key for the accept/reject draws (default: ``mx.random.key(0)``)
    nan_policy : {'reject', 'raise'}, optional
        What to do when the log acceptance ratio is NaN, for instance when
        both estimates are ``-inf`` (default: 'reject')
    verbose : bool, optional
        If True, print progress updates (default: False)

    Returns
    -------
    result : PMMHResult
        ``(samples, log_densities, acceptance_rate)`` where ``samples`` has
        shape ``(num_samples, m)`` in iteration order.

    Raises
    ------
    InvalidParameter
        If a count is out of range or ``initial_state`` is not a non-empty
        vector. Raised before any function is evaluated.
    DimensionMismatch
        If a proposal is not of shape ``(m,)`` or a density is not scalar.
    NumericalDegenerate
        If ``nan_policy='raise'`` and the log acceptance ratio is NaN.

    Examples
    --------
    >>> walk = GaussianRandomWalk(0.5, key=mx.random.key(1))
    >>> result = pseudo_marginal_metropolis_hastings(
    ...     estimator, walk.log_prob, walk, [0.0],
    ...     num_estimator_samples=100, num_burnin=500, num_samples=1000,
    ...     key=mx.random.key(0),
    ... )
    >>> result.samples.shape
    (1000, 1)
    """
    num_estimator_samples = _check_count(
        "num_estimator_samples", num_estimator_samples, 1
    )
    num_burnin = _check_count("num_burnin", num_burnin, 0)
    num_samples = _check_count("num_samples", num_samples, 1)
    if nan_policy not in NAN_POLICIES:
        raise InvalidParameter(
            f"nan_policy must be one of {NAN_POLICIES}, got {nan_policy!r}"
        )

    if np.ndim(initial_state) != 1 or np.size(initial_state) == 0:
        raise InvalidParameter(
            "initial_state must be a non-empty vector, "
            f"got shape {np.shape(initial_state)}"
        )
    current_state = mx.array(initial_state).astype(mx.float32)
    dim = current_state.size

    if key is None:
        key = mx.random.key(0)

    current_log_density = _as_log_density(
        log_density_estimator(current_state, num_estimator_samples),
        "log_density_estimator",
    )

    # All accept/reject draws up front, one per transition
    num_transitions = num_burnin + num_samples - 1
    if num_transitions > 0:
        # Uniforms on (0, 1] so log_u is finite and a -inf ratio always rejects
        uniforms = 1.0 - mx.random.uniform(shape=(num_transitions,), key=key)
        log_u = mx.log(uniforms).tolist()
    else:
        log_u = []

    samples = []
    log_densities = []
    if num_burnin == 0:
        samples.append(current_state.tolist())
        log_densities.append(current_log_density)

    if verbose:
        print(f"Running {num_transitions} pseudo-marginal Metropolis-Hastings "
              f"transitions ({num_burnin} burn-in)...")

    n_accepted = 0
    for i in range(num_transitions):
        proposed_state = _as_state(propose(current_state), dim)

        # Fresh estimate at the proposal, the current one is reused
        proposed_log_density = _as_log_density(
            log_density_estimator(proposed_state, num_estimator_samples),
            "log_density_estimator",
        )
        log_q_reverse = _as_log_density(
            log_proposal_density(current_state, proposed_state),
            "log_proposal_density",
        )
        log_q_forward = _as_log_density(
            log_proposal_density(proposed_state, current_state),
            "log_proposal_density",
        )

        log_ratio = (
            proposed_log_density + log_q_reverse
            - current_log_density - log_q_forward
        )
        if math.isnan(log_ratio):
            if nan_policy == "raise":
                raise NumericalDegenerate(
                    f"log acceptance ratio is NaN at transition {i + 1} "
                    f"(proposal estimate {proposed_log_density}, "
                    f"current estimate {current_log_density})"
                )
            accept = False
        else:
            log_alpha = min(0.0, log_ratio)
            accept = log_u[i] <= log_alpha

        if accept:
            current_state = proposed_state
            current_log_density = proposed_log_density
            n_accepted += 1

        # Transition i produces iteration i + 2
        if i + 2 > num_burnin:
            samples.append(current_state.tolist())
            log_densities.append(current_log_density)

        if verbose and (i + 1) % 500 == 0:
            print(f"  Iteration {i+1}/{num_transitions} "
                  f"(accept rate: {n_accepted/(i+1):.2%})")

    acceptance_rate = n_accepted / num_transitions if num_transitions > 0 else 0.0

    if verbose:
        print(f"Acceptance rate: {acceptance_rate:.2%}")

    return PMMHResult(
        samples=mx.array(samples),
        log_densities=np.array(log_densities, dtype=np.float64),
        acceptance_rate=acceptance_rate,
    )


def run(
    log_density_estimator,
    log_proposal_density,
    propose,
    initial_state,
    num_estimator_samples,
    num_burnin,
    num_samples,
    key=None,
):
    """
    Run a pseudo-marginal chain and return only its trace.

    Shorthand for :func:`pseudo_marginal_metropolis_hastings` with the
    default NaN policy and no progress output.

    Returns
    -------
    samples : mlx.core.array
        Trace of shape ``(num_samples, m)``, iteration-major, in float32
        whatever the dtype of ``initial_state`` or of the proposals.
    """
    return pseudo_marginal_metropolis_hastings(
        log_density_estimator,
        log_proposal_density,
        propose,
        initial_state,
        num_estimator_samples,
        num_burnin,
        num_samples,
        key=key,
    ).samples
