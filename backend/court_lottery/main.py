import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from court_lottery.database import dispose_engine, init_db
from court_lottery.routes import booking_requests, bookings, lottery

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Court Lottery API")

_cors_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
_extra = os.getenv("CORS_ORIGINS", "")
if _extra:
    _cors_origins.extend(o.strip() for o in _extra.split(",") if o.strip())

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(lottery.router, prefix="/api", tags=["lottery"])
app.include_router(booking_requests.router, prefix="/api", tags=["booking-requests"])
app.include_router(bookings.router, prefix="/api", tags=["bookings"])


@app.on_event("startup")
def on_startup():
    init_db()
    logger.info("Court Lottery API started with %d routes", len(app.routes))


@app.on_event("shutdown")
def on_shutdown():
    dispose_engine()


@app.get("/api/health")
def health_check():
    return {"app_name": "Court Lottery API", "status": "healthy"}
