"""
Standard normal random source for Monte Carlo simulation.

A NormalSource owns one numpy Generator. Its state advances with every draw
and is never reset, so pricing calls that share a source continue one
evolving stream. Callers wanting independent, reproducible calls give each
call a fresh source (or a fresh seed).

See: NumPy "Parallel Random Number Generation" (SeedSequence.spawn)
"""

from typing import Optional, Union

import numpy as np

from option_mc.config.settings import SETTINGS


class NormalSource:
    """
    Source of independent N(0, 1) variates.

    Parameters
    ----------
    seed : int or None, default 0
        Non-negative seed. None seeds from OS entropy.

    Examples
    --------
    >>> source = NormalSource(seed=0)
    >>> z = source.sample()
    >>> block = source.samples((4, 3))
    >>> block.shape
    (4, 3)
    """

    def __init__(self, seed: Optional[int] = 0):
        if seed is not None:
            if isinstance(seed, bool) or not isinstance(seed, (int, np.integer)):
                raise ValueError(f"CRITICAL: seed must be a non-negative integer, got {seed!r}")
            if seed < 0:
                raise ValueError(f"CRITICAL: seed must be >= 0, got {seed}")
            seed = int(seed)

        self._seed = seed
        self._seed_sequence = np.random.SeedSequence(seed)
        self._generator = np.random.default_rng(self._seed_sequence)

    @classmethod
    def from_entropy(cls) -> "NormalSource":
        """Source seeded from OS entropy (non-reproducible)."""
        return cls(seed=None)

    @classmethod
    def from_settings(cls) -> "NormalSource":
        """Source following SETTINGS.simulation seed policy."""
        if SETTINGS.simulation.random_seed:
            return cls.from_entropy()
        return cls(seed=SETTINGS.simulation.default_seed)

    @classmethod
    def _from_seed_sequence(cls, seed_sequence: np.random.SeedSequence) -> "NormalSource":
        source = cls.__new__(cls)
        source._seed = None
        source._seed_sequence = seed_sequence
        source._generator = np.random.default_rng(seed_sequence)
        return source

    @property
    def seed(self) -> Optional[int]:
        """Seed supplied at construction (None for entropy or spawned sources)."""
        return self._seed

    @property
    def entropy(self) -> Union[int, tuple]:
        """Root entropy; NormalSource(seed=entropy) replays a non-spawned stream."""
        return self._seed_sequence.entropy

    def sample(self) -> float:
        """Draw one standard normal variate."""
        return float(self._generator.standard_normal())

    def samples(self, size: Union[int, tuple[int, ...]]) -> np.ndarray:
        """
        Draw an array of standard normal variates.

        Values are filled in row-major order from the same stream as
        sample(), so a (n_paths, n_steps) block holds each path's draws
        consecutively.
        """
        return self._generator.standard_normal(size)

    def spawn(self, n_children: int) -> list["NormalSource"]:
        """
        Create statistically independent child sources.

        Intended for parallel workers: each worker draws from its own child
        stream, none of which overlaps this source or each other.

        Parameters
        ----------
        n_children : int
            Number of child sources

        Returns
        -------
        list[NormalSource]
            Independent sources
        """
        if n_children <= 0:
            raise ValueError(f"CRITICAL: n_children must be > 0, got {n_children}")
        return [self._from_seed_sequence(child) for child in self._seed_sequence.spawn(n_children)]

    def __repr__(self) -> str:
        return f"NormalSource(seed={self._seed!r})"
