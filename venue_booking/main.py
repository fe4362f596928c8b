import logging
import os
import time

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from venue_booking.api.routes.routes import to_http_error, router
from venue_booking.domain.exceptions import VenueBookingError
from venue_booking.infrastructure.db.session import engine
from venue_booking.infrastructure.db.models import Base
from venue_booking.infrastructure.seed_catalog import SEED_PACKAGES, SEED_VENUES

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Venue Booking Engine")
app.include_router(router)


@app.exception_handler(VenueBookingError)
async def domain_error_handler(request: Request, exc: VenueBookingError):
    # Fallback for domain errors a route did not translate itself.
    http_error = to_http_error(exc)
    logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=http_error.status_code,
        content={"detail": http_error.detail},
    )


def _wait_for_db() -> None:
    max_attempts = int(os.getenv("DB_CONNECT_MAX_RETRIES", "30"))
    delay = float(os.getenv("DB_CONNECT_RETRY_DELAY", "1.5"))

    attempt = 1
    while True:
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            logger.info("Database reachable at %s", engine.url.render_as_string())
            return
        except OperationalError:
            if attempt >= max_attempts:
                logger.exception("Giving up on the database after %s attempts", attempt)
                raise
            logger.warning(
                "Database not ready (attempt %s/%s), retrying in %.1fs",
                attempt,
                max_attempts,
                delay,
            )
            attempt += 1
            time.sleep(delay)


@app.on_event("startup")
def on_startup() -> None:
    _wait_for_db()
    Base.metadata.create_all(bind=engine)
    logger.info(
        "Venue booking engine ready: %s seed venues, %s seed packages",
        len(SEED_VENUES),
        len(SEED_PACKAGES),
    )
