def fmt_pct(value: float | None, decimals: int = 2) -> str:
    if value is None:
        return "N/A"
    if value == 0:
        return f"{0:.{decimals}f}%"
    return f"{value:+.{decimals}f}%"


def fmt_currency(value: float | None, symbol: str = "₩") -> str:
    if value is None:
        value = 0.0
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(round(value)):,}"


def fmt_signed_currency(value: float | None, symbol: str = "₩") -> str:
    text = fmt_currency(value, symbol)
    if value is not None and value >= 0:
        return "+" + text
    return text


def fmt_correlation(value: float | None) -> str:
    if value is None:
        return "-"
    return f"{value:.2f}"


def truncate_label(text: str, max_chars: int, marker: str = "..") -> str:
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + marker
