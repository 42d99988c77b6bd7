# rankformat.py

from ladder import parse_division, parse_tier

TIER_SHORT = {
    "IRON": "I",
    "BRONZE": "B",
    "SILVER": "S",
    "GOLD": "G",
    "PLATINUM": "P",
    "EMERALD": "E",
    "DIAMOND": "D",
    "MASTER": "M",
    "GRANDMASTER": "GM",
    "CHALLENGER": "C",
}

DIVISION_SHORT = {"I": "1", "II": "2", "III": "3", "IV": "4"}

TIER_ICON = {
    "IRON": "⬛",
    "BRONZE": "🟤",
    "SILVER": "⚪",
    "GOLD": "🟡",
    "PLATINUM": "🔵",
    "EMERALD": "🟢",
    "DIAMOND": "🔷",
    "MASTER": "🟣",
    "GRANDMASTER": "🔴",
    "CHALLENGER": "⭐",
}


def format_rank(tier, division=None, lp=None) -> str:
    """Gold II 50 LP / Master 120 LP / Unranked"""
    t = parse_tier(tier)
    if t is None:
        return "Unranked"

    nice = t.name.capitalize()
    d = parse_division(division)
    if d is not None and not t.is_apex:
        nice = f"{nice} {d.name}"
    return f"{nice} {lp or 0} LP"


def format_rank_short(tier, division=None) -> str:
    t = parse_tier(tier)
    if t is None:
        return "UR"

    short = TIER_SHORT[t.name]
    d = parse_division(division)
    if t.is_apex or d is None:
        return short
    return f"{short}{DIVISION_SHORT[d.name]}"


def format_delta(delta) -> str:
    rounded = int(round(delta))
    if rounded == 0:
        return "0"
    sign = "+" if rounded > 0 else "-"
    return f"{sign} {abs(rounded)}"


def describe_progression(first, last) -> str:
    diff = int(round((last.score or 0) - (first.score or 0)))
    if diff == 0:
        return "0 LP"
    return f"{diff:+d} LP"


def time_ago(from_ms: int, now_ms: int) -> str:
    diff_sec = int((now_ms - from_ms) / 1000)
    secs = abs(diff_sec)

    if secs < 60:
        n, unit = secs, "second"
    elif secs < 3600:
        n, unit = secs // 60, "minute"
    elif secs < 48 * 3600:
        n, unit = secs // 3600, "hour"
    else:
        n, unit = secs // 86400, "day"

    if n == 0:
        return "now"

    label = f"{n} {unit}{'' if n == 1 else 's'}"
    return f"{label} ago" if diff_sec > 0 else f"in {label}"


def rank_icon(tier) -> str:
    t = parse_tier(tier)
    if t is None:
        return "⚫"
    return TIER_ICON.get(t.name, "⚫")


def wr_bar(wr: float) -> str:
    filled = min(10, max(0, int(round(wr / 10))))
    return "▓" * filled + "░" * (10 - filled)
