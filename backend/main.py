import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from backend.auth.jwt_handler import SigningKeyMissingError
from backend.core import config
from backend.core.errors import StoreError, StoreFailure
from backend.database import Base, engine
from backend.models import assignment, course, user  # noqa: F401
from backend.routes import assignment_routes, course_routes, user_routes

logging.basicConfig(level=config.LOG_LEVEL)

app = FastAPI()

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

logger = logging.getLogger(__name__)


def describe_validation_errors(errors) -> str:
    messages = []
    for error in errors:
        location = '.'.join(str(part) for part in error.get('loc', ()) if part != 'body')
        message = error.get('msg', 'Invalid value').removeprefix('Value error, ')
        messages.append(f'{location}: {message}' if location else message)
    return '; '.join(messages) or 'Invalid request.'


@app.on_event('startup')
def initialize_database() -> None:
    config.validate_runtime_config()
    try:
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL and Postgres credentials.')


@app.exception_handler(StoreError)
async def handle_store_error(request: Request, exc: StoreError) -> JSONResponse:
    if isinstance(exc, StoreFailure):
        logger.error('%s %s failed: %s', request.method, request.url.path, exc.message, exc_info=exc.__cause__ or exc)
    return JSONResponse(status_code=exc.status_code, content={'error': exc.message})


@app.exception_handler(SigningKeyMissingError)
async def handle_missing_signing_key(request: Request, exc: SigningKeyMissingError) -> JSONResponse:
    logger.critical('Cannot issue or check tokens: %s', exc)
    return JSONResponse(status_code=500, content={'error': 'Server is not configured to issue tokens.'})


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={'error': describe_validation_errors(exc.errors())},
    )


@app.exception_handler(StarletteHTTPException)
async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={'error': exc.detail},
        headers=getattr(exc, 'headers', None),
    )


@app.get('/')
def root():
    return {'status': 'Course Tracker API Running'}


app.include_router(user_routes.router, prefix='/api/users')
app.include_router(course_routes.router, prefix='/api/courses')
app.include_router(assignment_routes.router, prefix='/api/assignments')
