"""
Water taxonomy: the enumerations every other module speaks in.

``WaterGroup`` is the provenance/region tag carried on the record.
``Category`` is the *derived* usage class computed by the classifier; it is
never read from input.  Keeping the two apart matters: a Russian table water
can still classify as Therapeutic, and a record tagged Therapeutic is always
Therapeutic regardless of its numbers.

``ALIASES`` maps loose spellings seen in source data (third-party label
scrapes, spreadsheets) onto canonical values.  Lookups are case-insensitive.

This module has NO imports from any other ``water_radar`` package.
"""

from enum import StrEnum


class WaterGroup(StrEnum):
    """Provenance / region tag."""

    RUSSIA = "Russia"
    EUROPE = "Europe"
    THERAPEUTIC = "Therapeutic"


class Category(StrEnum):
    """Usage category derived from group, TDS and sodium."""

    DAILY = "Daily"
    """Fine for everyday drinking."""

    ROTATE = "Rotate"
    """Noticeably mineralized; alternate with a lighter water."""

    THERAPEUTIC = "Therapeutic"
    """Medicinal-table or high-salt water; not for unrestricted daily use."""

    UNKNOWN = "Unknown"
    """Neither TDS nor sodium is known."""


class SourceType(StrEnum):
    """Where the mineral figures came from."""

    OFFICIAL = "official"
    THIRD_PARTY_ESTIMATE = "third_party_estimate"
    APPROXIMATE = "approximate"
    SEED = "seed"


class ConfidenceLevel(StrEnum):
    """How much the figures are trusted.  Ranking tie-break only."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _CONFIDENCE_RANK[self]


_CONFIDENCE_RANK: dict[ConfidenceLevel, int] = {
    ConfidenceLevel.HIGH:   2,
    ConfidenceLevel.MEDIUM: 1,
    ConfidenceLevel.LOW:    0,
}


class Profile(StrEnum):
    """Named weighting scheme for the scorer.  Exactly one is active."""

    EVERYDAY = "Everyday"
    PRESSURE = "Pressure"
    SPORT = "Sport"
    SENSITIVE = "Sensitive"
    KID = "Kid"


class MetricKey(StrEnum):
    """The seven tracked metrics, in canonical order."""

    CA = "ca"
    MG = "mg"
    K = "k"
    NA = "na"
    CL = "cl"
    PH = "ph"
    TDS = "tds"

    @property
    def field_name(self) -> str:
        """Attribute name on ``Water`` holding this metric."""
        return "ph" if self is MetricKey.PH else f"{self.value}_mg_l"


class MetricBand(StrEnum):
    """Per-metric status band shown next to a value in reports."""

    DAILY = "daily"
    ROTATE = "rotate"
    THERAPEUTIC = "therapeutic"
    UNKNOWN = "unknown"


class Achievement(StrEnum):
    """Presentation tags.  Not used for ranking."""

    DAILY = "daily"
    THERAPEUTIC = "therapeutic"
    SPORT = "sport"
    COFFEE = "coffee"
    SPARKLING = "sparkling"
    STILL = "still"


# ── Loose-input aliases ───────────────────────────────────────────────────────

ALIASES: dict[type[StrEnum], dict[str, StrEnum]] = {
    SourceType: {
        "pickaqua":             SourceType.THIRD_PARTY_ESTIMATE,
        "third-party-estimate": SourceType.THIRD_PARTY_ESTIMATE,
        "third_party":          SourceType.THIRD_PARTY_ESTIMATE,
        "approx":               SourceType.APPROXIMATE,
    },
    ConfidenceLevel: {
        "med": ConfidenceLevel.MEDIUM,
    },
}


def lookup_enum(enum_cls: type[StrEnum], raw: object) -> StrEnum | None:
    """Resolve ``raw`` to a member of ``enum_cls``, case-insensitively.

    Matches member values first, then ``ALIASES``.  Returns ``None`` for
    anything unrecognized (including ``None`` and blank strings).
    """
    if raw is None:
        return None
    if isinstance(raw, enum_cls):
        return raw
    key = str(raw).strip().lower()
    if not key:
        return None
    for member in enum_cls:
        if member.value.lower() == key:
            return member
    return ALIASES.get(enum_cls, {}).get(key)
