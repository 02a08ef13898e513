import logging

logging.basicConfig(
    level=logging.INFO,
    format="[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
)
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from schedule_checker.config import get_settings
from schedule_checker.controllers.events import router as events_router
from schedule_checker.controllers.health import router as health_router
from schedule_checker.controllers.ws_events import router as ws_events_router
from schedule_checker.errors import register_exception_handlers
from schedule_checker.lifespan import lifespan
from schedule_checker.middleware import HTTPLogMiddleware

settings = get_settings()

app = FastAPI(title="Schedule Checker API", version="1.0.0", lifespan=lifespan)
register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors.origins,
    allow_origin_regex=settings.cors.origins_regex or None,
    allow_credentials=settings.cors.allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

if settings.debug.request:
    logging.getLogger("schedule_checker.http").setLevel(logging.DEBUG)
    app.add_middleware(HTTPLogMiddleware)

if settings.debug.websocket:
    logging.getLogger("schedule_checker.ws").setLevel(logging.DEBUG)

app.include_router(health_router)
app.include_router(events_router)
app.include_router(ws_events_router)
