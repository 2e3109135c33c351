"""Enumerations shared by the pension, tax and optimizer schemas."""

import enum
from datetime import date


class FilingStatus(str, enum.Enum):
    """Federal filing status."""

    SINGLE = "single"
    MARRIED_FILING_JOINTLY = "married_filing_jointly"
    HEAD_OF_HOUSEHOLD = "head_of_household"
    MARRIED_FILING_SEPARATELY = "married_filing_separately"


class MembershipGroup(str, enum.Enum):
    """MSRB job classification groups."""

    GROUP_1 = "GROUP_1"  # general employees
    GROUP_2 = "GROUP_2"  # hazardous duty
    GROUP_3 = "GROUP_3"  # state police
    GROUP_4 = "GROUP_4"  # public safety

    @property
    def number(self) -> int:
        return int(self.value[-1])

    @classmethod
    def coerce(cls, value):
        """Accept GROUP_1, "Group 1", "1" or 1."""
        if isinstance(value, cls):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            value = str(value)
        if isinstance(value, str):
            digits = "".join(ch for ch in value if ch.isdigit())
            if digits in ("1", "2", "3", "4") and value.strip().upper().replace(" ", "_") in (
                digits, f"GROUP_{digits}", f"GROUP{digits}"
            ):
                return cls(f"GROUP_{digits}")
        raise ValueError(f"Unknown membership group {value!r}; expected GROUP_1..GROUP_4")


class HireEra(str, enum.Enum):
    """Membership date relative to the 2012 pension reform."""

    BEFORE_2012 = "before_2012"
    AFTER_2012 = "after_2012"


# Members joining on or after this date fall under the reformed schedules
HIRE_ERA_CUTOFF = date(2012, 4, 2)


class BenefitOption(str, enum.Enum):
    """Retirement allowance payment options."""

    A = "A"  # full allowance, nothing to a beneficiary
    B = "B"  # reduced allowance, unused contributions refunded
    C = "C"  # reduced allowance, 2/3 continues to the survivor


class RiskTolerance(str, enum.Enum):
    CONSERVATIVE = "conservative"
    MODERATE = "moderate"
    AGGRESSIVE = "aggressive"


class InflationScenario(str, enum.Enum):
    CONSERVATIVE = "conservative"
    MODERATE = "moderate"
    OPTIMISTIC = "optimistic"


class PensionColaMode(str, enum.Enum):
    """How pension cost-of-living increases are projected."""

    COMPOUND = "compound"  # rate applied to the whole allowance
    MA_BASE = "ma_base"  # rate applied to the statutory base only
