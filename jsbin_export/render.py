"""Renders the export index page with Jinja2."""
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import jinja2
from jinja2 import Environment, FileSystemLoader, select_autoescape

from jsbin_export.config import TEMPLATES_DIR
from jsbin_export.errors import TemplateError
from jsbin_export.parse.models import ExportSnapshot

logger = logging.getLogger(__name__)

INDEX_TEMPLATE = "index.html"
# Fixed English abbreviations; strftime's %b follows the locale
MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
          "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def format_date(value: str) -> str:
    """Format an ISO date as 'DD MMM YYYY', e.g. '05 Jan 2024'."""
    date = datetime.fromisoformat(value.strip().removesuffix("Z"))
    return f"{date.day:02d} {MONTHS[date.month - 1]} {date.year}"


def loose_equals(value: Any, other: Any) -> bool:
    """Equality that also matches a number against its string form."""
    if value == other:
        return True
    if value is None or other is None:
        return False
    numbers = (int, float)
    if isinstance(value, numbers) != isinstance(other, numbers):
        return str(value) == str(other)
    return False


def create_environment(template_dir: Path = TEMPLATES_DIR) -> Environment:
    """Build a fresh environment with the date filter and equals test."""
    env = Environment(
        loader=FileSystemLoader(template_dir),
        autoescape=select_autoescape(),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["date"] = format_date
    env.tests["equals"] = loose_equals
    return env


def render_index(snapshot: ExportSnapshot, template: Optional[Path] = None) -> str:
    """Render the index page for a snapshot.

    `template` overrides the packaged template with a file of the
    caller's choosing; it is rendered with the same helpers.
    """
    if template is None:
        env, name = create_environment(), INDEX_TEMPLATE
    else:
        env, name = create_environment(template.parent), template.name
    try:
        return env.get_template(name).render(snapshot.to_dict())
    except jinja2.TemplateError as e:
        raise TemplateError(f"Could not render {name}: {e}") from e
    except ValueError as e:
        # Raised by format_date on a malformed timestamp
        raise TemplateError(f"Could not render {name}: {e}") from e
