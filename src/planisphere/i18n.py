"""Simple two-language (ko/en) translation helper for disc labels."""

_STRINGS: dict[str, dict[str, str]] = {
    "page_title": {
        "ko": "별자리판",
        "en": "Planisphere",
    },
    "dir_n": {"ko": "북", "en": "N"},
    "dir_ne": {"ko": "북동", "en": "NE"},
    "dir_e": {"ko": "동", "en": "E"},
    "dir_se": {"ko": "남동", "en": "SE"},
    "dir_s": {"ko": "남", "en": "S"},
    "dir_sw": {"ko": "남서", "en": "SW"},
    "dir_w": {"ko": "서", "en": "W"},
    "dir_nw": {"ko": "북서", "en": "NW"},
    "month": {"ko": "{n}월", "en": "{name}"},
    "hour": {"ko": "{n}시", "en": "{n}h"},
    "ra_hour": {"ko": "{n}h", "en": "{n}h"},
    "legend_location": {
        "ko": "위치: {lon:.2f}°, {lat:.2f}°  UTC{offset:+g}",
        "en": "Location: {lon:.2f}°, {lat:.2f}°  UTC{offset:+g}",
    },
}

CARDINAL_KEYS: tuple[str, ...] = (
    "dir_n",
    "dir_ne",
    "dir_e",
    "dir_se",
    "dir_s",
    "dir_sw",
    "dir_w",
    "dir_nw",
)

_MONTH_NAMES = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)  # fmt: skip


def t(key: str, lang: str, **kwargs: object) -> str:
    """Return the translated string for key in lang, formatted with kwargs.

    Falls back to 'en', then to the key itself if not found.
    """
    entry = _STRINGS.get(key)
    if entry is None:
        return key
    text = entry.get(lang) or entry.get("en") or key
    return text.format(**kwargs) if kwargs else text


def month_label(month: int, lang: str) -> str:
    return t("month", lang, n=month, name=_MONTH_NAMES[month - 1])


def hour_label(hour: int, lang: str) -> str:
    return t("hour", lang, n=hour)
