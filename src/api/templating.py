"""
Jinja2 template environment shared by all HTML routes
"""

from pathlib import Path
from fastapi.templating import Jinja2Templates

from config.settings import CATALOG_PREFIX

TEMPLATES_DIR = Path(__file__).parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.globals["catalog_prefix"] = CATALOG_PREFIX
