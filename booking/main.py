from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from booking.core.config import settings
from booking.core.errors import install_error_handlers
from booking.core.logging_config import configure_logging, install_request_logging
from booking.db.session import init_db
from booking.api.router import router as api_router

API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.MODE)
    if settings.DB_AUTO_CREATE:
        init_db()
    yield


app = FastAPI(title=settings.APP_NAME, version="0.1.0", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
install_request_logging(app)
install_error_handlers(app)

app.include_router(api_router, prefix=API_PREFIX)

@app.get("/", include_in_schema=False)
def landing():
    return JSONResponse({"service": settings.APP_NAME, "status": "ok"})

@app.get("/health")
def health():
    return {"status": "ok"}


def run() -> None:
    uvicorn.run("booking.main:app", host=settings.HOST, port=settings.PORT, log_config=None)
