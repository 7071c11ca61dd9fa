"""Text processing utilities."""

from app.core.constants import EXTERNAL_ID_LOG_PREFIX


def mask_identifier(
    value: str | None, visible: int = EXTERNAL_ID_LOG_PREFIX
) -> str | None:
    """Mask an external identifier for logging.

    Launch identifiers are bearer-like: anyone holding both can open the
    dashboard. Only a short prefix is kept so log lines stay correlatable.

    Args:
        value: The identifier to mask
        visible: Number of leading characters to keep

    Returns:
        The masked identifier, or None when there is nothing to mask

    Examples:
        >>> mask_identifier("BFSHDH1284FHT")
        'BFSH***'
        >>> mask_identifier("AB")
        '***'
    """
    if not value:
        return None
    if len(value) <= visible:
        return "***"
    return f"{value[:visible]}***"
