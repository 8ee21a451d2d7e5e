import os

from fastapi.staticfiles import StaticFiles

from ..infrastructure.app_factory import create_application
from ..infrastructure.config.settings import get_settings
from ..infrastructure.database.session import Database
from .web import router as web_router
from .web.templating import templates

settings = get_settings()

database = Database.from_settings(settings)

app = create_application(
    router=web_router,
    templates=templates,
    settings=settings,
    database=database,
    description="""
    # Local Library Catalog

    Server-rendered pages for the physical copies of each catalogued book:

    * list and inspect copies with their book resolved
    * create, update and delete copies through validated forms
    """,
)

static_dir = os.path.join(os.path.dirname(__file__), "static")
if os.path.isdir(static_dir):
    app.mount("/static", StaticFiles(directory=static_dir), name="static")
