"""
Human-readable formatting helpers
"""

SIZE_UNIT = 1024
SIZE_PREFIXES = "KMGTPE"


def format_file_size(size: int) -> str:
    """
    Format a byte count using base-1024 units

    Example:
        >>> format_file_size(512)
        '512 B'
        >>> format_file_size(2355)
        '2.3 KB'
    """
    if size < SIZE_UNIT:
        return f"{size} B"

    divisor = SIZE_UNIT
    exponent = 0
    remaining = size // SIZE_UNIT
    while remaining >= SIZE_UNIT and exponent < len(SIZE_PREFIXES) - 1:
        divisor *= SIZE_UNIT
        exponent += 1
        remaining //= SIZE_UNIT

    return f"{size / divisor:.1f} {SIZE_PREFIXES[exponent]}B"
