import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.audit import router as audit_router
from app.api.fields import router as fields_router
from app.api.forms import router as forms_router
from app.api.health import router as health_router
from app.api.me import router as me_router
from app.core.config import settings
from app.core.errors import ConfigurationError, NotFoundError, ReferentialError
from app.schemas.responses import ErrorResponse

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

app = FastAPI(title="Form Builder API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(status_code: int, message: str, errors: dict[str, list[str]] | None = None) -> JSONResponse:
    body = ErrorResponse(message=message, errors=errors)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@app.exception_handler(ConfigurationError)
@app.exception_handler(ReferentialError)
async def configuration_error_handler(request: Request, exc):
    return _error(422, "Validation failed", exc.errors)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return _error(404, exc.message)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors: dict[str, list[str]] = {}
    for err in exc.errors():
        # drop the "body"/"query"/"path" prefix so keys read like configuration.label.en
        loc = [str(p) for p in err["loc"][1:]] or [str(p) for p in err["loc"]]
        errors.setdefault(".".join(loc), []).append(err["msg"])
    return _error(422, "Validation failed", jsonable_encoder(errors))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(message=message).model_dump(exclude_none=True),
        headers=getattr(exc, "headers", None),
    )


app.include_router(health_router)
app.include_router(me_router)
app.include_router(forms_router)
app.include_router(fields_router)
app.include_router(audit_router)
