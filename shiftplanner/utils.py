"""Utility functions for formatting numbers in logs and results."""


def format_currency(amount: float) -> str:
    """
    Format a currency amount with thousand separators and 2 decimal places.

    Args:
        amount: Amount to format

    Returns:
        Formatted string like "1,234.50" (negative amounts keep their sign)

    Examples:
        >>> format_currency(1234.5)
        '1,234.50'
        >>> format_currency(-86.5)
        '-86.50'
    """
    return f"{amount:,.2f}"


def format_computation_time(time_ms: float) -> str:
    """
    Format a duration in milliseconds for display.

    Args:
        time_ms: Duration in milliseconds

    Returns:
        "850ms" below one second, "2.4s" below one minute, otherwise "1m 5s"

    Examples:
        >>> format_computation_time(850)
        '850ms'
        >>> format_computation_time(2400)
        '2.4s'
        >>> format_computation_time(65000)
        '1m 5s'
    """
    if time_ms < 1000:
        return f"{int(time_ms)}ms"
    if time_ms < 60000:
        return f"{time_ms / 1000:.1f}s"
    minutes = int(time_ms // 60000)
    seconds = int((time_ms % 60000) // 1000)
    return f"{minutes}m {seconds}s"
