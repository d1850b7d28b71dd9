from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .exceptions import DataAccessError, DataIntegrityError
from .loggers import app_logger
from .routers import analyses, appointments, reports, users

app = FastAPI(
    docs_url=settings.BASE_URL + "/docs",
    redoc_url=settings.BASE_URL + "/redoc",
    openapi_url=settings.BASE_URL + "/openapi.json",
    title=settings.API_TITLE,
    version=settings.API_VERSION,
)

app.include_router(users.router)
app.include_router(appointments.router)
app.include_router(analyses.router)
app.include_router(reports.router)

ALLOWED_ORIGINS = [
    "*",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
):
    message = ", ".join(error["msg"] for error in exc.errors())
    app_logger.warning(f"{request.method} {request.url.path} rejected: {message}")

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "message": message},
    )


@app.exception_handler(DataIntegrityError)
async def data_integrity_error_handler(request: Request, exc: DataIntegrityError):
    app_logger.warning(f"{request.method} {request.url.path} conflicted: {exc}")

    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"success": False, "message": "Duplicate or dangling reference"},
    )


@app.exception_handler(DataAccessError)
async def data_access_error_handler(request: Request, exc: DataAccessError):
    app_logger.error(
        f"{request.method} {request.url.path} failed with data access error: {exc}",
        exc_info=exc,
    )

    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"success": False, "message": "Data store unavailable"},
    )


@app.on_event("startup")
def startup():
    app_logger.info(
        f"Application is in startup using the {settings.STORE_BACKEND} store backend"
    )


@app.get(settings.BASE_URL + "/health", tags=["Health"])
def health_check():
    return {"success": True, "store_backend": settings.STORE_BACKEND}
