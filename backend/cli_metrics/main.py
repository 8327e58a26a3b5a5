import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from cli_metrics.api.deps import get_locale
from cli_metrics.api.routes import logitems, probes
from cli_metrics.core.config import settings
from cli_metrics.core.errors import RecordNotFound, StoreFailure
from cli_metrics.i18n import translator
from cli_metrics.store import RecordStore, init_store

logger = logging.getLogger(__name__)

API_PREFIX = '/v1.0'


class StoreInitError(RuntimeError):
    pass


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Served without an injected store (e.g. `uvicorn cli_metrics.main:app`):
    # open the configured one and refuse to start if that fails.
    owned = None
    if getattr(app.state, 'store', None) is None:
        init = init_store(settings.DB_PATH)
        if not init.ok:
            raise StoreInitError(init.error)
        app.state.store = owned = init.store
    yield
    if owned is not None:
        owned.close()


def create_app(store: RecordStore | None = None) -> FastAPI:
    app = FastAPI(title='CLI Metrics Server', lifespan=lifespan)
    app.state.store = store

    app.include_router(logitems.router, prefix=f'{API_PREFIX}/logitem', tags=['logitem'])
    app.include_router(probes.router, tags=['meta'])

    @app.middleware('http')
    async def add_locale_header(request: Request, call_next):
        locale = request.headers.get('X-Locale', settings.DEFAULT_LOCALE)
        request.state.locale = locale
        response = await call_next(request)
        response.headers['Content-Language'] = locale
        return response

    @app.exception_handler(RequestValidationError)
    async def malformed_request_handler(request: Request, exc: RequestValidationError):
        logger.warning('Malformed request %s %s: %s', request.method, request.url.path, exc.errors())
        msg = translator.t('errors.malformed', locale=get_locale(request), error=_first_error(exc))
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={'detail': msg})

    @app.exception_handler(RecordNotFound)
    async def not_found_handler(request: Request, exc: RecordNotFound):
        logger.info('Log item %d not found', exc.item_id)
        msg = translator.t('logitem.not_found', locale=get_locale(request), id=exc.item_id)
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={'detail': msg})

    @app.exception_handler(StoreFailure)
    async def store_failure_handler(request: Request, exc: StoreFailure):
        logger.error('Store failure on %s %s: %s', request.method, request.url.path, exc)
        msg = translator.t('errors.store_failure', locale=get_locale(request))
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={'detail': msg})

    @app.exception_handler(SQLAlchemyError)
    async def storage_error_handler(request: Request, exc: SQLAlchemyError):
        logger.exception('Storage error on %s %s', request.method, request.url.path)
        msg = translator.t('errors.internal', locale=get_locale(request), error=str(exc))
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={'detail': msg})

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception('Unhandled error on %s %s', request.method, request.url.path)
        msg = translator.t('errors.internal', locale=get_locale(request), error=str(exc))
        return JSONResponse(status_code=500, content={'detail': msg})

    return app


def _first_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return 'invalid request'
    first = errors[0]
    loc = '.'.join(str(part) for part in first.get('loc', ()))
    return f"{loc}: {first.get('msg', 'invalid')}"


app = create_app()
