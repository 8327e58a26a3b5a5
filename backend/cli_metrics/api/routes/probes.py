from fastapi import APIRouter, Depends, HTTPException, status

from cli_metrics.api.deps import get_store
from cli_metrics.store import RecordStore

router = APIRouter()


@router.get('/readiness')
def readiness(store: RecordStore = Depends(get_store)):
    if not store.ping():
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail='not ready')
    return 'ready'


@router.get('/healthz')
def liveness():
    return 'alive'
