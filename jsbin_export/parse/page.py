"""Helpers for the list payload and the downloaded bin pages."""
import logging
from typing import Any

logger = logging.getLogger(__name__)

# Footer line present in every quiet view
LICENSE_MARKER = "Released under the MIT license: http://jsbin.mit-license.org"


def flatten_list(data: Any) -> list:
    """Flatten the list payload one level, keeping order."""
    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON array, got {type(data).__name__}")
    flat = []
    for entry in data:
        if isinstance(entry, list):
            flat.extend(entry)
        else:
            flat.append(entry)
    return flat


def add_date_to_page(html: str, date: str | None) -> str:
    """Insert a 'Last update' line right after the license footer."""
    if LICENSE_MARKER not in html:
        logger.debug("License marker not found, page left unchanged")
        return html
    return html.replace(LICENSE_MARKER, f"{LICENSE_MARKER}\n\nLast update: {date}", 1)
