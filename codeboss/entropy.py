"""Entropy admission control.

Decides locally, before any remote search runs, whether a template has enough
variants for the target prefix.

If the target pins down ``b`` bits, a single variant misses with probability
``(2^b - 1) / 2^b``; trying ``n`` variants misses every time with probability
``((2^b - 1) / 2^b) ** n``. We require that to be at most ``1 / r`` for the
configured inverse failure rate ``r``, i.e.::

    n >= ln(1 / r) / ln((2^b - 1) / 2^b)
"""

import math
from dataclasses import dataclass

from codeboss.exceptions import InsufficientEntropyError


@dataclass(frozen=True)
class EntropyAssessment:
    """Outcome of admission control for one template."""

    variant_count: int
    required_variant_count: int
    is_valid: bool
    failure_probability: float
    target_failure_probability: float

    @property
    def entropy_bits(self) -> float:
        return entropy_bits(self.variant_count)

    @property
    def required_entropy_bits(self) -> float:
        return entropy_bits(self.required_variant_count)


def _log_miss_probability(target_bits: int) -> float:
    # ln((2^b - 1) / 2^b), exact for wide targets where the ratio rounds to 1.0
    return math.log1p(-(2.0 ** -target_bits))


def required_variants(target_bits: int, inverse_failure_rate: int) -> int:
    """Minimum number of variants needed for the desired failure rate."""
    n = math.log(1 / inverse_failure_rate) / _log_miss_probability(target_bits)
    return math.ceil(n)


def failure_probability(target_bits: int, variant_count: int) -> float:
    """Probability that no variant hits the target."""
    # exp/log form so huge integer counts don't overflow float pow
    return math.exp(variant_count * _log_miss_probability(target_bits))


def entropy_bits(variant_count: int) -> float:
    """Entropy in bits of a template with the given variant count."""
    if variant_count <= 0:
        return 0.0
    return math.log2(variant_count)


def validate_entropy(variant_count: int, target_bits: int, inverse_failure_rate: int) -> EntropyAssessment:
    """Assess whether a variant count is enough for the target.

    Args:
        variant_count: Number of variants the template expands to.
        target_bits: Bits pinned down by the target prefix.
        inverse_failure_rate: Accept at most a 1-in-this chance of failure.

    Returns:
        The assessment, valid or not.
    """
    required = required_variants(target_bits, inverse_failure_rate)
    return EntropyAssessment(
        variant_count=variant_count,
        required_variant_count=required,
        is_valid=variant_count >= required,
        failure_probability=failure_probability(target_bits, variant_count),
        target_failure_probability=1 / inverse_failure_rate,
    )


def require_entropy(variant_count: int, target_bits: int, inverse_failure_rate: int) -> EntropyAssessment:
    """Like validate_entropy, but raise when the template is rejected.

    Raises:
        InsufficientEntropyError: If the assessment fails.
    """
    assessment = validate_entropy(variant_count, target_bits, inverse_failure_rate)
    if not assessment.is_valid:
        raise InsufficientEntropyError(assessment)
    return assessment


def format_entropy_error(assessment: EntropyAssessment) -> str:
    """Render a rejected assessment with the numbers behind it."""
    if assessment.failure_probability > 0:
        one_in = f"{round(1 / assessment.failure_probability):,}"
    else:
        one_in = "inf"
    lines = [
        "Not enough entropy",
        "",
        f"   Template variations: {assessment.variant_count:,} ({assessment.entropy_bits:.1f} bits)",
        f"   Required variations: {assessment.required_variant_count:,} ({assessment.required_entropy_bits:.1f} bits)",
        "",
        f"   Failure probability: 1 in {one_in}",
        f"   Target probability:  1 in {round(1 / assessment.target_failure_probability):,}",
    ]
    return "\n".join(lines)
