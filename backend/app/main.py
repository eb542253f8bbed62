"""Customer CRM backend entrypoint: FastAPI app with customer and note routers."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.app.api import customers
from backend.app.api import notes
from backend.app.core.error_handlers import register_exception_handlers
from backend.app.core.logging import setup_logging
from backend.app.core.settings import get_settings

settings = get_settings()
setup_logging(settings.log_level)

app = FastAPI(title=settings.app_name, version=settings.api_version)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

register_exception_handlers(app)

app.include_router(customers.router)
app.include_router(notes.router)


@app.get("/")
def read_root():
    return {"app": "Customer CRM backend", "status": "ok"}


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.on_event("startup")
def create_sql_table():
    if settings.store_backend != "sql":
        return
    from backend.app.db.base import Base
    from backend.app.db.session import engine

    Base.metadata.create_all(bind=engine)
