"""
Jinja2 Template Configuration

Centralized template loader for rendering HTML responses.
This instance is imported by route handlers to render templates.
"""

from pathlib import Path

from fastapi.templating import Jinja2Templates

from twixxer.utils.text import avatar_initial, format_timestamp


TEMPLATES_DIR = Path(__file__).parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

# Filters used by the chirp partials
templates.env.filters["timestamp"] = format_timestamp
templates.env.filters["initial"] = avatar_initial
