from fastapi import FastAPI
from .core.config import settings
from .core.errors import register_error_handlers
from .core.logging_setup import setup_logging
from .db.session import init_db
from .api.routes import audio, categories, health, progress, tasks

app = FastAPI(title=settings.APP_NAME)
register_error_handlers(app)
app.include_router(health.router,     prefix=settings.API_PREFIX)
app.include_router(tasks.router,      prefix=settings.API_PREFIX)
app.include_router(audio.router,      prefix=settings.API_PREFIX)
app.include_router(categories.router, prefix=settings.API_PREFIX)
app.include_router(progress.router,   prefix=settings.API_PREFIX)

@app.on_event("startup")
def on_startup():
    setup_logging(settings.LOG_LEVEL, settings.LOG_DIR)
    if settings.STORE_BACKEND == "local":
        init_db()
