"""High-level pseudo-marginal inference interface."""

import numpy as np
import mlx.core as mx
from mlx_pmmh.kernels.pseudo_marginal import pseudo_marginal_metropolis_hastings


class PMMH:
    """High-level pseudo-marginal Metropolis-Hastings interface.

    Holds the model (a log-density estimator) and the proposal, runs the
    chain and keeps its output for summaries.

    Parameters
    ----------
    log_density_estimator : callable
        ``log_density_estimator(state, N)`` returning a noisy, unbiased
        (on the density scale) estimate of the log target density
    log_proposal_density : callable
        ``log_proposal_density(x, given)`` returning log q(x | given)
    propose : callable
        ``propose(state)`` drawing a candidate state
    param_names : list of str, optional
        Names for the state dimensions, used by ``summary()``
        (default: ``theta[0]``, ``theta[1]``, ...)

    Examples
    --------
    >>> from mlx_pmmh import PMMH, GaussianRandomWalk
    >>>
    >>> walk = GaussianRandomWalk(0.5, key=mx.random.key(1))
    >>> pmmh = PMMH(estimator, walk.log_prob, walk, param_names=['mu'])
    >>> samples = pmmh.run([0.0], num_samples=1000, num_estimator_samples=50)
    >>> print(f"Mean: {np.mean(samples[:, 0]):.3f}")
    """

    def __init__(
        self,
        log_density_estimator,
        log_proposal_density,
        propose,
        param_names=None,
    ):
        self.log_density_estimator = log_density_estimator
        self.log_proposal_density = log_proposal_density
        self.propose = propose
        self.param_names = None if param_names is None else list(param_names)
        self.samples = None
        self.log_densities = None
        self.acceptance_rate = None

    def run(
        self,
        initial_state,
        num_samples=1000,
        num_burnin=1000,
        num_estimator_samples=1,
        random_seed=0,
        nan_policy='reject',
        verbose=True,
    ):
        """
        Run pseudo-marginal sampling.

        ``random_seed`` only fixes the accept/reject draws. Proposals and
        estimators that carry their own key (such as
        :class:`~mlx_pmmh.proposals.GaussianRandomWalk`) advance it on every
        call, so a second run with the same seed continues their random
        streams and gives a different trace. Build fresh instances with the
        same keys to replay a run exactly.

        Parameters
        ----------
        initial_state : array_like
            Initial chain state, a non-empty vector
        num_samples : int, optional
            Number of samples to keep after burn-in (default: 1000)
        num_burnin : int, optional
            Number of burn-in iterations to discard (default: 1000)
        num_estimator_samples : int, optional
            Monte Carlo effort N passed to the estimator (default: 1)
        random_seed : int, optional
            Seed of the accept/reject random key (default: 0)
        nan_policy : str, optional
            'reject' or 'raise' on a NaN acceptance ratio (default: 'reject')
        verbose : bool, optional
            If True, print progress information (default: True)

        Returns
        -------
        samples : np.ndarray
            Trace of shape ``(num_samples, m)``

        Raises
        ------
        ValueError
            If ``param_names`` does not match the state dimension, or any
            :class:`~mlx_pmmh.errors.InvalidParameter` from the sampler
        """
        if self.param_names is not None and len(self.param_names) != np.size(initial_state):
            raise ValueError(
                f"Got {len(self.param_names)} parameter names for a state "
                f"of dimension {np.size(initial_state)}"
            )

        if verbose:
            print(f"\n{'='*70}")
            print("MLX-PMMH: Pseudo-Marginal Metropolis-Hastings Sampling")
            print(f"{'='*70}\n")
            print(f"Burn-in: {num_burnin}, samples: {num_samples}, "
                  f"estimator samples: {num_estimator_samples}")

        result = pseudo_marginal_metropolis_hastings(
            self.log_density_estimator,
            self.log_proposal_density,
            self.propose,
            initial_state,
            num_estimator_samples,
            num_burnin,
            num_samples,
            key=mx.random.key(random_seed),
            nan_policy=nan_policy,
            verbose=verbose,
        )

        # Convert to numpy arrays
        self.samples = np.array(result.samples)
        self.log_densities = result.log_densities
        self.acceptance_rate = result.acceptance_rate

        if verbose:
            print(f"\n{'='*70}")
            print("Sampling complete!")
            print(f"{'='*70}\n")

        return self.samples

    def _names(self):
        if self.param_names is not None:
            return self.param_names
        return [f"theta[{j}]" for j in range(self.samples.shape[1])]

    @staticmethod
    def _interval_bounds(credible_interval):
        """Lower and upper percentiles of a central credible interval."""
        alpha = 1 - credible_interval
        return 100 * alpha / 2, 100 * (1 - alpha / 2)

    def summary(self, credible_interval=0.95):
        """
        Compute summary statistics for each state dimension.

        Interval bounds are keyed by their percentile, e.g. ``'2.5%'`` and
        ``'97.5%'`` for the default 95% interval.

        Parameters
        ----------
        credible_interval : float, optional
            Credible interval width (default: 0.95 for 95% CI)

        Returns
        -------
        summary : dict
            Dictionary with summary statistics for each parameter

        Raises
        ------
        ValueError
            If sampling hasn't been run yet
        """
        if self.samples is None:
            raise ValueError("Must run sampling first. Call run() method.")

        lower_pct, upper_pct = self._interval_bounds(credible_interval)

        summary = {}
        for j, param_name in enumerate(self._names()):
            trace = self.samples[:, j]
            lower, upper = np.percentile(trace, [lower_pct, upper_pct])
            summary[param_name] = {
                'mean': float(np.mean(trace)),
                'std': float(np.std(trace)),
                'median': float(np.median(trace)),
                f'{lower_pct:.1f}%': float(lower),
                f'{upper_pct:.1f}%': float(upper),
            }

        return summary

    def print_summary(self, credible_interval=0.95):
        """Print summary statistics and the acceptance rate."""
        summary = self.summary(credible_interval)
        lower_pct, upper_pct = self._interval_bounds(credible_interval)
        lower_key = f'{lower_pct:.1f}%'
        upper_key = f'{upper_pct:.1f}%'

        print("\nPosterior Summary:")
        print("="*80)
        print(f"{'Parameter':<15} {'Mean':<10} {'Std':<10} {'Median':<10} {f'{int(credible_interval*100)}% CI':<20}")
        print("-"*80)

        for param_name, stats in summary.items():
            ci_str = f"[{stats[lower_key]:.3f}, {stats[upper_key]:.3f}]"
            print(f"{param_name:<15} {stats['mean']:<10.3f} {stats['std']:<10.3f} "
                  f"{stats['median']:<10.3f} {ci_str:<20}")

        print("="*80)
        print(f"Acceptance rate: {self.acceptance_rate:.2%}")
