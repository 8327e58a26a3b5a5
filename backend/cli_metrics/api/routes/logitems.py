from fastapi import APIRouter, Depends

from cli_metrics.api.deps import ItemId, get_store
from cli_metrics.core.errors import RecordNotFound
from cli_metrics.models.log_item import LogItem
from cli_metrics.schemas.log_item import LogItemIn, LogItemOut
from cli_metrics.store import RecordStore

router = APIRouter()


def _to_model(data: LogItemIn) -> LogItem:
    return LogItem(
        id=data.id,
        result_code=data.result_code,
        machine_id=data.machine_id,
        info=data.info,
        client_timestamp=data.client_timestamp,
    )


def _all_items(store: RecordStore) -> list[LogItemOut]:
    return [LogItemOut.from_item(item) for item in store.list_all()]


@router.get('', response_model=list[LogItemOut], response_model_exclude_defaults=True)
def list_log_items(store: RecordStore = Depends(get_store)):
    return _all_items(store)


@router.post('', response_model=LogItemOut, response_model_exclude_defaults=True)
def create_log_item(data: LogItemIn, store: RecordStore = Depends(get_store)):
    """Store a new item; a non-zero ``id`` in the body upserts that id."""
    item = store.store(_to_model(data))
    return LogItemOut.from_item(item)


@router.get('/{item_id}', response_model=LogItemOut, response_model_exclude_defaults=True)
def get_log_item(item_id: ItemId, store: RecordStore = Depends(get_store)):
    return LogItemOut.from_item(store.get(item_id))


@router.post('/{item_id}', response_model=list[LogItemOut], response_model_exclude_defaults=True)
def update_log_item(item_id: ItemId, data: LogItemIn, store: RecordStore = Depends(get_store)):
    """Replace the whole row with ``item_id``; the path id wins over the body.

    Fields missing from the body are stored empty, not kept from the old row.
    """
    store.store(_to_model(data.model_copy(update={'id': item_id})))
    return _all_items(store)


@router.delete('/{item_id}', response_model=list[LogItemOut], response_model_exclude_defaults=True)
def delete_log_item(item_id: ItemId, store: RecordStore = Depends(get_store)):
    if store.delete(item_id) == 0:
        raise RecordNotFound(item_id)
    return _all_items(store)
