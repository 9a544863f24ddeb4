#!/usr/bin/env python3
"""
CybRisk - Distribution Samplers
Normal (Box-Muller), log-normal, gamma, beta and PERT draws built on an
injected uniform source. None of these functions touch global state.

Degenerate parameters never raise inside the simulation domain:
  PERT with max == min        -> min, no draw
  PERT with undefined shape   -> uniform over [min, max]
  exact-zero uniform draws    -> redrawn (normal) or replaced by 1e-10 (gamma)
"""

import math

from .rng import RNG

# Standard PERT shape parameter
PERT_LAMBDA = 4.0

# Substitute for an exact-zero uniform in the gamma sampler
_ZERO_DRAW = 1e-10


def box_muller(rng: RNG) -> float:
    """Standard normal draw. Consumes two uniforms, more if either is 0."""
    u1 = rng()
    u2 = rng()

    # log(0) is undefined
    while u1 == 0.0:
        u1 = rng()
    while u2 == 0.0:
        u2 = rng()

    return math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)


def sample_log_normal(mu: float, sigma: float, rng: RNG) -> float:
    """exp(mu + sigma * z) for one standard normal z."""
    z = box_muller(rng)
    try:
        return math.exp(mu + sigma * z)
    except OverflowError:
        return math.inf


def sample_gamma(shape: float, rng: RNG) -> float:
    """
    Gamma(shape, 1) draw.

    shape >= 1 uses Marsaglia-Tsang; shape < 1 boosts once through
    Gamma(shape + 1) * U**(1/shape) (Ahrens-Dieter), which always lands in
    the first regime.
    """
    if not (shape > 0 and math.isfinite(shape)):
        raise ValueError(f"gamma shape must be positive and finite, got {shape!r}")

    if shape < 1:
        u = rng()
        if u == 0.0:
            u = _ZERO_DRAW
        return sample_gamma(shape + 1.0, rng) * u ** (1.0 / shape)

    d = shape - 1.0 / 3.0
    c = 1.0 / math.sqrt(9.0 * d)

    while True:
        x = box_muller(rng)
        v = 1.0 + c * x
        while v <= 0.0:
            x = box_muller(rng)
            v = 1.0 + c * x

        v = v * v * v
        u = rng()
        if u == 0.0:
            u = _ZERO_DRAW

        # Squeeze test
        if u < 1.0 - 0.0331 * (x * x) * (x * x):
            return d * v

        if math.log(u) < 0.5 * x * x + d * (1.0 - v + math.log(v)):
            return d * v


def sample_beta(alpha: float, beta: float, rng: RNG) -> float:
    """Beta(alpha, beta) as the ratio of two gamma draws."""
    ga = sample_gamma(alpha, rng)
    gb = sample_gamma(beta, rng)
    total = ga + gb
    if total == 0.0:
        # Both draws underflowed (tiny shapes); fall back to the mean
        return alpha / (alpha + beta)
    return ga / total


def _uniform(minimum: float, maximum: float, rng: RNG) -> float:
    return minimum + (maximum - minimum) * rng()


def sample_pert(minimum: float, mode: float, maximum: float, rng: RNG) -> float:
    """
    PERT(min, mode, max) draw via a reparameterized beta.

    When the shape parameters come out non-positive or non-finite (mode equal
    to the PERT mean, mode outside the range) the draw degrades to a uniform
    over [min, max] rather than raising.
    """
    if maximum == minimum:
        return minimum

    mu = (minimum + PERT_LAMBDA * mode + maximum) / (PERT_LAMBDA + 2.0)

    denominator = (mode - mu) * (maximum - minimum)
    if denominator == 0.0:
        return _uniform(minimum, maximum, rng)
    alpha = ((mu - minimum) * (2.0 * mode - minimum - maximum)) / denominator
    if alpha <= 0.0 or not math.isfinite(alpha):
        return _uniform(minimum, maximum, rng)

    if mu == minimum:
        return _uniform(minimum, maximum, rng)
    beta_param = (alpha * (maximum - mu)) / (mu - minimum)
    if beta_param <= 0.0 or not math.isfinite(beta_param):
        return _uniform(minimum, maximum, rng)

    x = sample_beta(alpha, beta_param, rng)
    return minimum + (maximum - minimum) * x
