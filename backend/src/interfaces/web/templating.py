"""Jinja2 environment shared by every HTML page."""

import os

from fastapi.templating import Jinja2Templates

from ...infrastructure.config.settings import get_settings

templates_dir = os.path.join(os.path.dirname(os.path.dirname(__file__)), "templates")

templates = Jinja2Templates(directory=templates_dir)
templates.env.globals["app_name"] = get_settings().APP_NAME
