"""Beta posterior sampling for category selection."""

import math
from typing import Callable, Literal

import numpy as np

BetaSampler = Callable[[float, float, np.random.Generator], float]

# above this shape the exponential sum is replaced by numpy's gamma draw
EXPONENTIAL_SUM_MAX_SHAPE = 64


def sample_beta_numpy(alpha: float, beta: float, rng: np.random.Generator) -> float:
    """Exact Beta(alpha, beta) draw."""
    return float(rng.beta(alpha, beta))


def sample_gamma_integer_shape(shape: float, rng: np.random.Generator) -> float:
    """Gamma(k, 1) draw for integer ``k = max(1, floor(shape))``.

    Small shapes use the sum of ``k`` exponential variates, each ``-ln(U)``.
    Larger shapes draw ``Gamma(k, 1)`` directly so cost stays constant.
    """
    k = max(1, math.floor(shape))
    if k > EXPONENTIAL_SUM_MAX_SHAPE:
        return float(rng.standard_gamma(k))
    # 1 - U lies in (0, 1], avoiding log(0)
    uniforms = 1.0 - rng.random(k)
    return float(-np.log(uniforms).sum())


def sample_beta_log_uniform(alpha: float, beta: float, rng: np.random.Generator) -> float:
    """Beta draw from two integer-shape Gamma variates.

    Shapes are rounded down, so this is an approximation suited to ranking,
    not to inference.
    """
    ga = sample_gamma_integer_shape(alpha, rng)
    gb = sample_gamma_integer_shape(beta, rng)
    total = ga + gb
    if total == 0:
        return 0.5
    return ga / total


BETA_SAMPLERS: dict[str, BetaSampler] = {
    "numpy": sample_beta_numpy,
    "log_uniform": sample_beta_log_uniform,
}


def get_beta_sampler(name: Literal["numpy", "log_uniform"] = "numpy") -> BetaSampler:
    try:
        return BETA_SAMPLERS[name]
    except KeyError:
        raise ValueError(f"Unknown beta sampler: {name}") from None
