"""RFC 8288 Link headers for paginated responses."""

from typing import Any, Dict, Optional
from urllib.parse import urlencode


def create_link_header(
    base_url: str,
    params: Dict[str, Any],
    next_cursor: Optional[str] = None,
    prev_cursor: Optional[str] = None
) -> Optional[str]:
    """Create Link header for pagination as per RFC 8288.

    The next link continues with ``after``, the previous link pages back with
    ``before``; any cursor already present in ``params`` is replaced.

    Args:
        base_url: Base URL for the resource
        params: Current query parameters
        next_cursor: Cursor for next page
        prev_cursor: Cursor for previous page

    Returns:
        Link header value or None if no links
    """
    base_params = {k: v for k, v in params.items() if k not in ("after", "before") and v is not None}
    links = []

    if next_cursor:
        next_url = f"{base_url}?" + urlencode({**base_params, "after": next_cursor})
        links.append(f'<{next_url}>; rel="next"')

    if prev_cursor:
        prev_url = f"{base_url}?" + urlencode({**base_params, "before": prev_cursor})
        links.append(f'<{prev_url}>; rel="prev"')

    return ", ".join(links) if links else None
