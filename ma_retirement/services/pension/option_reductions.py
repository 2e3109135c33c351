"""Option B and Option C allowance reductions.

Option B trades a small reduction for a refund of unused contributions;
Option C pays a reduced allowance for the member's life and two-thirds of
it to the surviving beneficiary. Option C factors come from an actuarial
table keyed by (member age, beneficiary age). Ages missing from the table
are resolved through a fixed chain of strategies; every result records
which strategy produced it.
"""

import enum
import logging
import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Optional

from ma_retirement.schemas.common import BenefitOption

logger = logging.getLogger(__name__)

# (age, reduction) anchors; linear between anchors, flat outside them
OPTION_B_ANCHORS = ((50, 0.01), (60, 0.03), (70, 0.05))

SURVIVOR_SHARE = 2 / 3
OPTION_C_GENERIC_FACTOR = 0.88
# Weighted distance beyond which a neighbor is not trusted
OPTION_C_MAX_NEIGHBOR_DISTANCE = 20

OPTION_DESCRIPTIONS = MappingProxyType({
    BenefitOption.A: "Option A: full allowance, no survivor benefit",
    BenefitOption.B: "Option B: reduced allowance, unused contributions refunded to beneficiary",
    BenefitOption.C: "Option C: reduced allowance, two-thirds continues to the survivor",
})


@dataclass(frozen=True)
class ReductionTableEntry:
    member_age: int
    beneficiary_age: int
    factor: float
    validated: bool = True


def _entries(*rows) -> MappingProxyType:
    return MappingProxyType({(r.member_age, r.beneficiary_age): r for r in rows})


# Validated entries were checked against MSRB calculator output. The rest
# are published approximations awaiting validation.
OPTION_C_TABLE = _entries(
    ReductionTableEntry(55, 53, 0.9295),
    ReductionTableEntry(56, 54, 0.9253),
    ReductionTableEntry(57, 55, 0.9209),
    ReductionTableEntry(58, 56, 0.9163),
    ReductionTableEntry(59, 57, 0.9570750314827313),
    ReductionTableEntry(55, 55, 0.94, validated=False),
    ReductionTableEntry(65, 55, 0.84, validated=False),
    ReductionTableEntry(65, 65, 0.89, validated=False),
    ReductionTableEntry(70, 65, 0.83, validated=False),
    ReductionTableEntry(70, 70, 0.86, validated=False),
)


class MatchKind(str, enum.Enum):
    EXACT = "exact"
    PROVISIONAL = "provisional"
    INTERPOLATED = "interpolated"
    NEAREST = "nearest"
    GENERIC = "generic"


@dataclass(frozen=True)
class ReductionLookup:
    """Option C factor plus how it was obtained."""

    factor: float
    match_kind: MatchKind
    source_key: Optional[tuple] = None
    capped_to_option_b: bool = False

    @property
    def approximated(self) -> bool:
        return self.match_kind is not MatchKind.EXACT or self.capped_to_option_b


def round_age(age: float) -> int:
    """Round half up, so 62.5 becomes 63."""
    return int(math.floor(age + 0.5))


# ── Option B ──────────────────────────────────────────────────────────────────


def option_b_reduction(age: float) -> float:
    """Fractional Option B reduction at a claiming age."""
    first_age, first_reduction = OPTION_B_ANCHORS[0]
    last_age, last_reduction = OPTION_B_ANCHORS[-1]
    if age <= first_age:
        return first_reduction
    if age >= last_age:
        return last_reduction

    for (lo_age, lo_red), (hi_age, hi_red) in zip(OPTION_B_ANCHORS, OPTION_B_ANCHORS[1:]):
        if lo_age <= age <= hi_age:
            return lo_red + (hi_red - lo_red) * (age - lo_age) / (hi_age - lo_age)
    return last_reduction


def option_b_factor(age: float) -> float:
    return 1 - option_b_reduction(age)


# ── Option C lookup chain ─────────────────────────────────────────────────────


def _exact_match(member_age: int, beneficiary_age: int) -> Optional[ReductionLookup]:
    entry = OPTION_C_TABLE.get((member_age, beneficiary_age))
    if entry is None:
        return None
    kind = MatchKind.EXACT if entry.validated else MatchKind.PROVISIONAL
    return ReductionLookup(entry.factor, kind, (member_age, beneficiary_age))


def _same_gap_interpolation(member_age: int, beneficiary_age: int) -> Optional[ReductionLookup]:
    """Linear interpolation on member age between entries with the same age gap."""
    gap = member_age - beneficiary_age
    same_gap = sorted(
        (e for e in OPTION_C_TABLE.values() if e.member_age - e.beneficiary_age == gap),
        key=lambda e: e.member_age,
    )
    below = [e for e in same_gap if e.member_age < member_age]
    above = [e for e in same_gap if e.member_age > member_age]
    if not below or not above:
        return None

    lo, hi = below[-1], above[0]
    weight = (member_age - lo.member_age) / (hi.member_age - lo.member_age)
    factor = lo.factor + (hi.factor - lo.factor) * weight
    return ReductionLookup(factor, MatchKind.INTERPOLATED, (lo.member_age, lo.beneficiary_age))


def _nearest_entry(member_age: int, beneficiary_age: int) -> Optional[ReductionLookup]:
    """Closest entry, weighting age-gap differences double."""
    gap = member_age - beneficiary_age

    def distance(entry: ReductionTableEntry) -> int:
        entry_gap = entry.member_age - entry.beneficiary_age
        return abs(entry_gap - gap) * 2 + abs(entry.member_age - member_age)

    best = min(
        OPTION_C_TABLE.values(),
        key=lambda e: (distance(e), e.member_age, e.beneficiary_age),
    )
    if distance(best) > OPTION_C_MAX_NEIGHBOR_DISTANCE:
        return None
    return ReductionLookup(best.factor, MatchKind.NEAREST, (best.member_age, best.beneficiary_age))


def _generic_reduction(member_age: int, beneficiary_age: int) -> ReductionLookup:
    return ReductionLookup(OPTION_C_GENERIC_FACTOR, MatchKind.GENERIC)


OPTION_C_LOOKUP_CHAIN = (
    _exact_match,
    _same_gap_interpolation,
    _nearest_entry,
    _generic_reduction,
)


def lookup_option_c_factor(member_age: float, beneficiary_age: float) -> ReductionLookup:
    """Resolve the Option C factor for rounded ages through the lookup chain.

    The factor never exceeds the Option B factor at the same age, so the
    ordering A >= B >= C holds for every input.
    """
    member = round_age(member_age)
    beneficiary = round_age(beneficiary_age)

    result = None
    for strategy in OPTION_C_LOOKUP_CHAIN:
        result = strategy(member, beneficiary)
        if result is not None:
            break

    ceiling = option_b_factor(member_age)
    if result.factor > ceiling:
        result = ReductionLookup(ceiling, result.match_kind, result.source_key, capped_to_option_b=True)

    if result.approximated:
        logger.debug(
            f"Option C factor for {member}/{beneficiary} resolved by "
            f"{result.match_kind.value} match: {result.factor:.4f}"
        )
    return result


def describe_option(option: BenefitOption) -> str:
    return OPTION_DESCRIPTIONS[BenefitOption(option)]
