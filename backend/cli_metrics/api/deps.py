from typing import Annotated

from fastapi import HTTPException, Path, Request, status

from cli_metrics.core.config import settings
from cli_metrics.i18n import translator
from cli_metrics.schemas.log_item import INT64_MAX, INT64_MIN
from cli_metrics.store import RecordStore

ItemId = Annotated[int, Path(ge=INT64_MIN, le=INT64_MAX)]


def get_locale(request: Request) -> str:
    return getattr(request.state, 'locale', settings.DEFAULT_LOCALE)


def get_store(request: Request) -> RecordStore:
    store = getattr(request.app.state, 'store', None)
    if store is None:
        # App served without an injected store and without running its lifespan.
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=translator.t('errors.store_unavailable', locale=get_locale(request)),
        )
    return store
