"""Deterministic linear congruential generator shared with external encoders."""

# Numerical Recipes LCG parameters
_MULTIPLIER = 1664525
_INCREMENT = 1013904223
_MODULUS = 4294967296  # 2^32


class SeededRandom:
    """
    Reproducible pseudo-random stream from a 32-bit seed.

    The multiplier, increment and float scaling must stay exactly as they
    are: encoders on other platforms derive the same table permutations
    from the same seed.
    """

    def __init__(self, seed: int):
        self.state = seed % _MODULUS

    def next_double(self) -> float:
        """
        Advance the state and return it scaled into [0, 1).

        Returns:
            state / 2^32 as a float
        """
        self.state = (_MULTIPLIER * self.state + _INCREMENT) % _MODULUS
        return self.state / _MODULUS

    def next_int(self, max_value: int) -> int:
        """
        Return an integer in [0, max_value).

        Args:
            max_value: Exclusive upper bound, must be positive

        Returns:
            floor(next_double() * max_value)
        """
        return int(self.next_double() * max_value)
