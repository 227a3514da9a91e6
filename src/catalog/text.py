import re

CFR_PREFIX = "38 cfr §"
_CFR_PREFIX_PATTERN = re.compile(r"38\s*cfr\s*§", re.IGNORECASE)
_SECTION_ID_STRIP = re.compile(r"[^a-z0-9.]+")


def normalize(text: str | None) -> str:
    return (text or "").lower().strip()


def short_section(section: str | None) -> str:
    """Normalized section with the literal ``38 cfr §`` prefix removed.

    Matching and scoring compare against this form, so "38 CFR § 4.124a"
    becomes "4.124a". Only the exact prefix is stripped; spacing variants such
    as "38 CFR §4.124a" keep their prefix here.
    """
    return normalize(section).replace(CFR_PREFIX, "").strip()


def display_section(section: str | None) -> str:
    # Display form tolerates spacing variants of the prefix.
    return _CFR_PREFIX_PATTERN.sub("", section or "").strip()


def section_anchor_id(section: str | None) -> str:
    return _SECTION_ID_STRIP.sub("", section or "")
