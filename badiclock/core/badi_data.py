# badiclock/core/badi_data.py
# -*- coding: utf-8 -*-
"""
Badí' calendar: static tables

Single source of truth for:
- the Naw-Rúz table (Badí' year → Gregorian month/day + Ayyám-i-Há length)
- month, weekday and intercalary-period names
- the fixed holy-day list

Data source for the Naw-Rúz table: HM Nautical Almanac Office figures as
published by the Bahá'í World Centre for 172–221 B.E.

All tables are immutable; safe to share between threads.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from types import MappingProxyType
from typing import Any, Dict, Mapping, Tuple

__all__ = [
    "NamePair", "NawRuzEntry", "HolyDay",
    "NAW_RUZ_TABLE", "TABLE_FIRST_YEAR", "TABLE_LAST_YEAR",
    "MONTHS", "WEEKDAYS", "AYYAM_I_HA", "INTERCALARY",
    "HOLY_DAYS", "ERA_OFFSET", "FALLBACK_MONTH", "FALLBACK_DAY",
    "DAYS_BEFORE_INTERCALARY", "MONTH_LENGTH",
]


@dataclass(frozen=True)
class NamePair:
    arabic: str
    english: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


@dataclass(frozen=True)
class NawRuzEntry:
    month: int
    day: int
    ayyam_i_ha_days: int


@dataclass(frozen=True)
class HolyDay:
    month: int
    day: int
    arabic: str
    english: str
    description: str
    work_suspended: bool

    @property
    def key(self) -> Tuple[int, int]:
        return (self.month, self.day)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ── calendar geometry ────────────────────────────────────────────────────────
# Year 1 B.E. began at Naw-Rúz 1844, so Gregorian year = Badí' year + 1843.
ERA_OFFSET: int = 1843
MONTH_LENGTH: int = 19
DAYS_BEFORE_INTERCALARY: int = 18 * MONTH_LENGTH  # 342

# Month value used for Ayyám-i-Há; never a real month number.
INTERCALARY: int = 0

# Out-of-table approximation
FALLBACK_MONTH: int = 3
FALLBACK_DAY: int = 20

# ── Naw-Rúz table ────────────────────────────────────────────────────────────
_E = NawRuzEntry
NAW_RUZ_TABLE: Mapping[int, NawRuzEntry] = MappingProxyType({
    172: _E(3, 21, 4), 173: _E(3, 20, 4), 174: _E(3, 20, 5), 175: _E(3, 21, 4),
    176: _E(3, 21, 4), 177: _E(3, 20, 4), 178: _E(3, 20, 5), 179: _E(3, 21, 4),
    180: _E(3, 21, 4), 181: _E(3, 20, 4), 182: _E(3, 20, 5), 183: _E(3, 21, 4),
    184: _E(3, 21, 4), 185: _E(3, 20, 4), 186: _E(3, 20, 4), 187: _E(3, 20, 5),
    188: _E(3, 21, 4), 189: _E(3, 20, 4), 190: _E(3, 20, 4), 191: _E(3, 20, 5),
    192: _E(3, 21, 4), 193: _E(3, 20, 4), 194: _E(3, 20, 4), 195: _E(3, 20, 5),
    196: _E(3, 21, 4), 197: _E(3, 20, 4), 198: _E(3, 20, 4), 199: _E(3, 20, 5),
    200: _E(3, 21, 4), 201: _E(3, 20, 4), 202: _E(3, 20, 4), 203: _E(3, 20, 5),
    204: _E(3, 21, 4), 205: _E(3, 20, 4), 206: _E(3, 20, 4), 207: _E(3, 20, 5),
    208: _E(3, 21, 4), 209: _E(3, 20, 4), 210: _E(3, 20, 4), 211: _E(3, 20, 5),
    212: _E(3, 21, 4), 213: _E(3, 20, 4), 214: _E(3, 20, 4), 215: _E(3, 20, 4),
    216: _E(3, 20, 5), 217: _E(3, 20, 4), 218: _E(3, 20, 4), 219: _E(3, 20, 4),
    220: _E(3, 20, 5), 221: _E(3, 20, 4),
})
del _E

TABLE_FIRST_YEAR: int = min(NAW_RUZ_TABLE)
TABLE_LAST_YEAR: int = max(NAW_RUZ_TABLE)

# ── names ────────────────────────────────────────────────────────────────────
MONTHS: Tuple[NamePair, ...] = (
    NamePair("Bahá", "Splendour"),
    NamePair("Jalál", "Glory"),
    NamePair("Jamál", "Beauty"),
    NamePair("`Aẓamat", "Grandeur"),
    NamePair("Núr", "Light"),
    NamePair("Raḥmat", "Mercy"),
    NamePair("Kalimát", "Words"),
    NamePair("Kamál", "Perfection"),
    NamePair("Asmá'", "Names"),
    NamePair("`Izzat", "Might"),
    NamePair("Mashíyyat", "Will"),
    NamePair("`Ilm", "Knowledge"),
    NamePair("Qudrat", "Power"),
    NamePair("Qawl", "Speech"),
    NamePair("Masá'il", "Questions"),
    NamePair("Sharaf", "Honour"),
    NamePair("Sulṭán", "Sovereignty"),
    NamePair("Mulk", "Dominion"),
    NamePair("`Alá'", "Loftiness"),
)

AYYAM_I_HA: NamePair = NamePair("Ayyám-i-Há", "Intercalary Days")

# Week starts Saturday (index 0).
WEEKDAYS: Tuple[NamePair, ...] = (
    NamePair("Jalál", "Glory"),           # Saturday
    NamePair("Jamál", "Beauty"),          # Sunday
    NamePair("Kamál", "Perfection"),      # Monday
    NamePair("Fiḍál", "Grace"),           # Tuesday
    NamePair("`Idál", "Justice"),         # Wednesday
    NamePair("Istijlál", "Majesty"),      # Thursday
    NamePair("Istiqlál", "Independence"), # Friday
)

# ── holy days ────────────────────────────────────────────────────────────────
# The Twin Holy Birthdays follow the lunar calendar in practice; they sit here
# at their fixed solar positions ('Ilm 5 and Qudrat 9).
HOLY_DAYS: Tuple[HolyDay, ...] = (
    HolyDay(1, 1, "Naw-Rúz", "Naw-Rúz",
            "Bahá'í New Year, at the vernal equinox.", True),
    HolyDay(2, 13, "Riḍván (1st day)", "First Day of Riḍván",
            "Bahá'u'lláh arrives in the Garden of Riḍván and declares His mission.", True),
    HolyDay(3, 2, "Riḍván (9th day)", "Ninth Day of Riḍván",
            "His family joins Bahá'u'lláh in the Garden of Riḍván.", True),
    HolyDay(3, 5, "Riḍván (12th day)", "Twelfth Day of Riḍván",
            "Bahá'u'lláh departs the Garden of Riḍván.", True),
    HolyDay(4, 8, "Declaration of the Báb", "Declaration of the Báb",
            "The Báb declares His mission in Shiraz, 1844.", True),
    HolyDay(4, 13, "Ascension of Bahá'u'lláh", "Ascension of Bahá'u'lláh",
            "Passing of Bahá'u'lláh at Bahjí, 1892.", True),
    HolyDay(6, 17, "Martyrdom of the Báb", "Martyrdom of the Báb",
            "Execution of the Báb in Tabriz, 1850.", True),
    HolyDay(12, 5, "Birth of the Báb", "Birth of the Báb",
            "Birth of the Báb in Shiraz, 1819.", True),
    HolyDay(13, 9, "Birth of Bahá'u'lláh", "Birth of Bahá'u'lláh",
            "Birth of Bahá'u'lláh in Tehran, 1817.", True),
    HolyDay(14, 4, "Day of the Covenant", "Day of the Covenant",
            "Celebration of the Covenant and of ʻAbdu'l-Bahá as its Centre.", False),
    HolyDay(14, 6, "Ascension of ʻAbdu'l-Bahá", "Ascension of ʻAbdu'l-Bahá",
            "Passing of ʻAbdu'l-Bahá in Haifa, 1921.", False),
)
