import re
from enum import Enum
from typing import Optional

_AGE_NUMBER = re.compile(r"(\d+)U|U(\d+)")


class AgeGroup(Enum):
    """
    Youth and adult age brackets with their customary period lengths.
    Value: (display_name, half_minutes, halftime_minutes, players_per_side, notes)
    """
    U8 = ("8U", 25, 10, 4, "Size 3 ball.")
    U10 = ("10U", 25, 10, 7, "Size 4 ball. Build-out line may apply.")
    U11 = ("11U", 30, 10, 9, "Size 4 ball. No intentional heading.")
    U12 = ("12U", 30, 10, 9, "Size 4 ball. No intentional heading.")
    U13 = ("13U", 35, 10, 11, "Size 5 ball.")
    U14 = ("14U", 35, 10, 11, "Size 5 ball.")
    U15 = ("15U", 40, 10, 11, None)
    U16 = ("16U", 40, 10, 11, None)
    U17 = ("17U", 45, 10, 11, None)
    U18 = ("18U", 45, 10, 11, None)
    U19 = ("19U", 45, 10, 11, None)
    GENERIC_YOUTH = ("Youth Generic", 30, 10, 11, None)
    GENERIC_ADULT = ("Adult Generic", 45, 10, 11, None)
    UNKNOWN = ("Unknown", 30, 5, None, None)

    @property
    def display_name(self) -> str:
        return self.value[0]

    @property
    def half_duration_minutes(self) -> int:
        return self.value[1]

    @property
    def halftime_duration_minutes(self) -> int:
        return self.value[2]

    @property
    def players(self) -> Optional[int]:
        return self.value[3]

    @property
    def notes(self) -> Optional[str]:
        return self.value[4]

    @classmethod
    def from_string(cls, value: Optional[str]) -> "AgeGroup":
        """
        Parse notations like "U10", "10U", "u 12" or a display name such as
        "Adult Generic". Anything unrecognised maps to UNKNOWN.
        """
        if not value or not value.strip():
            return cls.UNKNOWN

        normalized = value.upper().replace(" ", "").replace("-", "")

        for group in cls:
            if _normalize(group.display_name) == normalized or group.name == normalized:
                return group

        match = _AGE_NUMBER.search(normalized)
        if match:
            age = int(match.group(1) or match.group(2))
            return cls.from_age(age)

        return cls.UNKNOWN

    @classmethod
    def from_age(cls, age: int) -> "AgeGroup":
        if 0 <= age <= 8:
            return cls.U8
        # 9 year olds play up with the 10U bracket
        if age in (9, 10):
            return cls.U10
        by_age = {
            11: cls.U11, 12: cls.U12, 13: cls.U13, 14: cls.U14, 15: cls.U15,
            16: cls.U16, 17: cls.U17, 18: cls.U18, 19: cls.U19,
        }
        if age in by_age:
            return by_age[age]
        return cls.GENERIC_ADULT if age > 19 else cls.UNKNOWN


def _normalize(text: str) -> str:
    return text.upper().replace(" ", "").replace("-", "")
