"""Formatting helpers shared by command builders and messages."""


def format_seconds(value: float) -> str:
    """Format a timestamp for a command line without trailing zeros.

    Examples:
        >>> format_seconds(10.0)
        '10'
        >>> format_seconds(15.5)
        '15.5'
    """
    text = f"{value:.6f}".rstrip("0").rstrip(".")
    return text if text not in ("", "-0") else "0"


def format_mark(value: float | None) -> str:
    """Format a cut mark for display: two decimals or ``Not Set``."""
    if value is None:
        return "Not Set"
    return f"{value:.2f}"


def format_command(args: list) -> str:
    """Join command arguments for a log line."""
    return " ".join(str(arg) for arg in args)
