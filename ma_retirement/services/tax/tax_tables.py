"""2024 federal and Massachusetts income tax constants."""

from types import MappingProxyType

from ma_retirement.schemas.common import FilingStatus

TAX_YEAR = 2024

SINGLE = FilingStatus.SINGLE
JOINT = FilingStatus.MARRIED_FILING_JOINTLY
HEAD = FilingStatus.HEAD_OF_HOUSEHOLD
SEPARATE = FilingStatus.MARRIED_FILING_SEPARATELY

# Federal brackets: (upper bound of bracket, rate); None = no upper bound
FEDERAL_TAX_BRACKETS = MappingProxyType({
    SINGLE: (
        (11_600, 0.10),
        (47_150, 0.12),
        (100_525, 0.22),
        (191_950, 0.24),
        (243_725, 0.32),
        (609_350, 0.35),
        (None, 0.37),
    ),
    JOINT: (
        (23_200, 0.10),
        (94_300, 0.12),
        (201_050, 0.22),
        (383_900, 0.24),
        (487_450, 0.32),
        (731_200, 0.35),
        (None, 0.37),
    ),
    HEAD: (
        (16_550, 0.10),
        (63_100, 0.12),
        (100_500, 0.22),
        (191_950, 0.24),
        (243_700, 0.32),
        (609_350, 0.35),
        (None, 0.37),
    ),
    SEPARATE: (
        (11_600, 0.10),
        (47_150, 0.12),
        (100_525, 0.22),
        (191_950, 0.24),
        (243_725, 0.32),
        (365_600, 0.35),
        (None, 0.37),
    ),
})

FEDERAL_STANDARD_DEDUCTION = MappingProxyType({
    SINGLE: 14_600,
    JOINT: 29_200,
    HEAD: 21_900,
    SEPARATE: 14_600,
})

# Additional deduction per taxpayer aged 65+; joint filers are assumed to be
# two taxpayers of similar age
FEDERAL_AGE_65_ADDITIONAL_DEDUCTION = MappingProxyType({
    SINGLE: 1_950,
    JOINT: 3_100,
    HEAD: 1_950,
    SEPARATE: 1_550,
})

# Social Security provisional-income thresholds (base amount, adjusted base amount)
SOCIAL_SECURITY_THRESHOLDS = MappingProxyType({
    SINGLE: (25_000, 34_000),
    JOINT: (32_000, 44_000),
    HEAD: (25_000, 34_000),
    SEPARATE: (0, 0),  # filed separately while living with spouse
})
SS_TIER_1_RATE = 0.50
SS_TIER_2_RATE = 0.85

# ── Massachusetts ─────────────────────────────────────────────────────────────

MA_TAX_RATE = 0.05
MA_STANDARD_DEDUCTION = 4_400
MA_PERSONAL_EXEMPTION = 4_400
MA_AGE_65_EXEMPTION = 700


def ma_filer_count(filing_status: FilingStatus) -> int:
    """Joint returns claim deductions and exemptions for both spouses."""
    return 2 if filing_status is JOINT else 1
