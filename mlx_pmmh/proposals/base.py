"""Base class for proposal distributions."""

import mlx.core as mx


class Proposal:
    """Base class for proposal distributions q(x | given).

    A proposal is used directly as the two proposal callables of the
    sampler: the instance itself draws new states and ``log_prob`` is the
    matching log density.

    All proposals must implement:
    - __call__(state): Draw a candidate state from q(. | state)
    - log_prob(state, given): Compute log q(state | given)

    Parameters
    ----------
    key : mlx.core.array, optional
        Random key for drawing candidates (default: ``mx.random.key(0)``).
        It is split on every draw, so a fixed key gives a fixed sequence
        of candidates.
    """

    def __init__(self, key=None):
        self.key = mx.random.key(0) if key is None else key

    def next_key(self):
        """Split the internal key and return a fresh subkey."""
        self.key, subkey = mx.random.split(self.key)
        return subkey

    def __call__(self, state):
        """
        Draw a candidate state.

        Parameters
        ----------
        state : mlx.core.array
            Current chain state

        Returns
        -------
        proposal : mlx.core.array
            Candidate state with the same shape as ``state``
        """
        raise NotImplementedError(
            f"{self.__class__.__name__} must implement __call__()"
        )

    def log_prob(self, state, given):
        """
        Compute the log proposal density log q(state | given).

        Parameters
        ----------
        state : mlx.core.array
            Candidate state
        given : mlx.core.array
            State the candidate is proposed from

        Returns
        -------
        log_prob : mlx.core.array
            Scalar log density, summed over dimensions
        """
        raise NotImplementedError(
            f"{self.__class__.__name__} must implement log_prob()"
        )

    def __repr__(self):
        """String representation of the proposal."""
        return f"{self.__class__.__name__}()"
