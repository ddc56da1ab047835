"""Time-value-of-money primitives shared by the cash-flow and ROI stages.

Each function is a pure calculation with no side effects. Rates are
per-period fractions (a monthly series takes a monthly rate).
"""

from __future__ import annotations

import math
from typing import Sequence

IRR_MAX_ITERATIONS = 100
IRR_TOLERANCE = 1e-4


def calculate_roi(total_benefit: float, total_cost: float) -> float:
    """ROI% = (benefit - cost) / cost x 100, or 0 when there is no cost."""
    if total_cost == 0:
        return 0.0
    return (total_benefit - total_cost) / total_cost * 100


def present_value(flows: Sequence[float], rate: float) -> float:
    """Sum of flows[i] / (1 + rate)^(i + 1)."""
    if rate <= -1:
        raise ValueError(f"rate must be greater than -1, got {rate}")
    return sum(flow / (1 + rate) ** (i + 1) for i, flow in enumerate(flows))


def calculate_npv(
    flows: Sequence[float],
    rate: float,
    initial_investment: float = 0.0,
) -> float:
    """NPV = -initial_investment + sum(flows[i] / (1 + rate)^(i + 1))"""
    return -initial_investment + present_value(flows, rate)


def calculate_irr(flows: Sequence[float], initial_guess: float = 0.1) -> float:
    """Newton-Raphson search for the rate where the outlay is recovered.

    Solves f(r) = -flows[0] + sum_{j>=1} flows[j] / (1 + r)^j = 0, with
    flows[0] given as the size of the outlay. Stops after 100 iterations,
    once |f(r)| < 1e-4, or when the derivative is exactly zero. An empty
    series has an IRR of 0. A step that would leave the real domain
    (1 + r <= 0, overflow) ends the search at the last finite rate.
    """
    if not flows:
        return 0.0

    rate = initial_guess
    for _ in range(IRR_MAX_ITERATIONS):
        base = 1 + rate
        if base <= 0:
            break
        try:
            value = -flows[0]
            derivative = 0.0
            for j in range(1, len(flows)):
                value += flows[j] / base**j
                derivative -= j * flows[j] / base ** (j + 1)
        except (OverflowError, ZeroDivisionError):
            break

        if abs(value) < IRR_TOLERANCE:
            break
        if derivative == 0:
            break

        next_rate = rate - value / derivative
        if not math.isfinite(next_rate):
            break
        rate = next_rate

    return rate if math.isfinite(rate) else 0.0


def irr_from_signed_flows(net_flows: Sequence[float], initial_guess: float = 0.1) -> float:
    """IRR of a signed net-flow series whose first entry is the outlay.

    The returned rate zeroes calculate_npv(net_flows, rate, 0). A series
    without a sign change has no IRR and yields 0.
    """
    if not any(f < 0 for f in net_flows) or not any(f > 0 for f in net_flows):
        return 0.0
    return calculate_irr([-net_flows[0], *net_flows[1:]], initial_guess)


def discounted_payback_period(
    flows: Sequence[float],
    rate: float,
    initial_investment: float,
) -> int:
    """First period whose running discounted total reaches the investment.

    Returns len(flows) when the investment is never recovered.
    """
    running = 0.0
    for i, flow in enumerate(flows):
        running += flow / (1 + rate) ** (i + 1)
        if running >= initial_investment:
            return i + 1
    return len(flows)


def population_std(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    mean = sum(values) / len(values)
    return math.sqrt(sum((v - mean) ** 2 for v in values) / len(values))
