import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from rentdesk.core.errors import NotFoundError
from rentdesk.core.logging import setup_logging
from rentdesk.domain.interval import InvalidInterval
from rentdesk.middleware.request_logger import RequestLoggerMiddleware

from rentdesk.web.health import router as health_router
from rentdesk.web.routers import (
    booking_web,
    housekeeping_web,
    invoice_web,
    notification_web,
    property_web,
    report_web,
    settings_web,
)


# -------------------------------------------------
# Logging
# -------------------------------------------------

setup_logging()
logger = logging.getLogger(__name__)

logger.info("Starting application")


# -------------------------------------------------
# FastAPI
# -------------------------------------------------

app = FastAPI(
    title="RentDesk",
    description="Short-term rental bookings, reminders and invoices",
    version="0.1.0",
)

app.add_middleware(RequestLoggerMiddleware)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(InvalidInterval)
async def invalid_interval_handler(request: Request, exc: InvalidInterval):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content={"detail": str(exc)}
    )


app.include_router(health_router)
app.include_router(property_web.router)
app.include_router(booking_web.router)
app.include_router(notification_web.router)
app.include_router(settings_web.router)
app.include_router(invoice_web.router)
app.include_router(housekeeping_web.router)
app.include_router(report_web.router)


# -------------------------------------------------
# Lifecycle
# -------------------------------------------------


@app.on_event("startup")
async def on_startup():
    logger.info("FastAPI startup")

    from rentdesk.database import init_db

    await init_db()

    from rentdesk.services.scheduler_service import scheduler_service

    scheduler_service.start()


@app.on_event("shutdown")
async def on_shutdown():
    logger.info("FastAPI shutdown")

    from rentdesk.services.scheduler_service import scheduler_service

    scheduler_service.shutdown()
