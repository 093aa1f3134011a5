import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from healthify.config import settings
from healthify.database import dispose_db, init_db
from healthify.routers import profile, water
from healthify.utils.response import create_response, handle_exception, validation_message
from seed import run_seed

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.PROJECT_NAME)

# CORS for SPA / API access
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return handle_exception(exc)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    message = validation_message(exc.errors())
    logger.info("Rejected %s %s: %s", request.method, request.url.path, message)
    return create_response(message, None, status.HTTP_400_BAD_REQUEST, status_text="error")


@app.on_event("startup")
async def startup_event():
    init_db()
    run_seed()


@app.on_event("shutdown")
async def shutdown_event():
    dispose_db()

# Add routes
app.include_router(profile.router)
app.include_router(water.router)


@app.get("/")
def home():
    try:
        return create_response(
            message="Healthify API running",
            data={"service": "healthify-water"},
            status_code=status.HTTP_200_OK
        )
    except Exception as exc:
        return handle_exception(exc)


@app.get("/health")
def health_check():
    return create_response(message="ok", data={"status": "ok"}, status_code=status.HTTP_200_OK)
