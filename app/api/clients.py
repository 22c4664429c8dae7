from fastapi import APIRouter, Depends, HTTPException

from ..db import get_session
from ..schemas import ClientCreate, ClientRead, ClientStatusRead, ClientUpdate, DurationRead
from services import client_service
from services.records import ClientRecord
from services.reporting import client_status
from services.store import load_store
from services.subscription_status import countdown
from utils.time_utils import now

router = APIRouter(prefix="/clients", tags=["clients"])


def _duration(parts):
    return DurationRead.model_validate(parts) if parts is not None else None


@router.get("/", response_model=list[ClientRead])
def read_clients(
    search: str = "",
    product_id: int | None = None,
    seller_id: int | None = None,
    subscription_type: str | None = None,
    sort: str = client_service.SORT_EXPIRY_DESC,
    session=Depends(get_session),
):
    models = {c.id: c for c in client_service.get_all_clients()}
    records = [ClientRecord.from_model(c) for c in models.values()]
    try:
        filtered = client_service.filter_clients(
            records, search, product_id, seller_id, subscription_type, sort
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return [models[r.id] for r in filtered]


@router.post("/", response_model=ClientRead)
def add_client(client_in: ClientCreate, session=Depends(get_session)):
    try:
        return client_service.add_client(**client_in.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{client_id}", response_model=ClientRead)
def read_client(client_id: int, session=Depends(get_session)):
    client = client_service.get_client_by_id(client_id)
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")
    return client


@router.get("/{client_id}/status", response_model=ClientStatusRead)
def read_client_status(client_id: int, session=Depends(get_session)):
    store = load_store()
    record = store.get_client(client_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Client not found")
    moment = now()
    status = client_status(record, store, moment)
    timer = countdown(record.subscription, moment)
    return ClientStatusRead(
        client_id=record.id,
        full_name=record.full_name,
        state=status.state,
        progress=status.progress,
        commission=status.commission,
        product_name=status.product_name,
        seller_name=status.seller_name,
        remaining=_duration(timer.remaining),
        elapsed=_duration(timer.elapsed),
        until_start=_duration(timer.until_start),
    )


@router.put("/{client_id}", response_model=ClientRead)
def edit_client(client_id: int, client_in: ClientUpdate, session=Depends(get_session)):
    client = client_service.get_client_by_id(client_id)
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")
    try:
        return client_service.update_client(client, **client_in.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{client_id}")
def remove_client(client_id: int, session=Depends(get_session)):
    if not client_service.delete_client(client_id):
        raise HTTPException(status_code=404, detail="Client not found")
    return {"status": "deleted"}
