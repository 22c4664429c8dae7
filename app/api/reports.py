"""Отчёты, дашборд, импорт и экспорт CSV."""

from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.responses import Response

from ..db import get_session
from ..schemas import (
    BusinessInput,
    BusinessRead,
    DashboardRead,
    ExpiringClientRead,
    GlobalSummaryRead,
    ImportResultRead,
    ImportRowErrorRead,
    ProductSummaryRead,
    SellerSummaryRead,
)
from services import export_service, reporting
from services.business_service import calculate_business
from services.dashboard_service import get_dashboard
from services.import_service import CsvImportError, import_clients_csv
from services.reminders import build_reminder_mailto
from services.store import CrmStore, load_store
from services.subscription_status import classify
from utils.time_utils import now

router = APIRouter(tags=["reports"])

CSV_MEDIA_TYPE = "text/csv; charset=utf-8"


def _expiring_rows(store: CrmStore, moment) -> list[ExpiringClientRead]:
    return [
        ExpiringClientRead(
            client_id=c.id,
            full_name=c.full_name,
            email=c.email,
            end_date=c.subscription.end,
            state=classify(c.subscription, moment),
            reminder_url=build_reminder_mailto(c, store.get_product(c.product_id)),
        )
        for c in reporting.expiring_soon(store, moment)
    ]


@router.get("/reports/products", response_model=list[ProductSummaryRead])
def product_report(session=Depends(get_session)):
    return [
        ProductSummaryRead.model_validate(p)
        for p in reporting.product_summaries(load_store(), now())
    ]


@router.get("/reports/sellers", response_model=list[SellerSummaryRead])
def seller_report(session=Depends(get_session)):
    return [
        SellerSummaryRead.model_validate(s)
        for s in reporting.seller_summaries(load_store(), now())
    ]


@router.get("/reports/summary", response_model=GlobalSummaryRead)
def summary_report(session=Depends(get_session)):
    return GlobalSummaryRead.model_validate(reporting.global_summary(load_store(), now()))


@router.get("/reports/expiring", response_model=list[ExpiringClientRead])
def expiring_report(session=Depends(get_session)):
    return _expiring_rows(load_store(), now())


@router.get("/reports/dashboard", response_model=DashboardRead)
def dashboard(session=Depends(get_session)):
    store = load_store()
    moment = now()
    data = get_dashboard(store, moment)
    return DashboardRead(
        total_clients=data.total_clients,
        active_subscriptions=data.active_subscriptions,
        estimated_revenue=data.estimated_revenue,
        states=data.states,
        expiring=_expiring_rows(store, moment),
    )


@router.post("/reports/business", response_model=BusinessRead)
def business(data: BusinessInput):
    result = calculate_business(
        data.subscription_cost,
        data.card_quantity,
        data.cost_per_card,
        data.earning_per_card,
    )
    return BusinessRead.model_validate(result)


def _csv_response(rows, filename: str) -> Response:
    try:
        body = export_service.to_csv(rows)
    except export_service.ExportError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(
        content=body.encode("utf-8"),
        media_type=CSV_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/export/clients.csv")
def export_clients(session=Depends(get_session)):
    return _csv_response(export_service.client_export_rows(load_store()), "clienti.csv")


@router.get("/export/sales.csv")
def export_sales(session=Depends(get_session)):
    rows = export_service.sales_report_rows(load_store(), now())
    return _csv_response(rows, "report_vendite.csv")


@router.get("/export/products.csv")
def export_products(session=Depends(get_session)):
    rows = export_service.product_report_rows(load_store(), now())
    return _csv_response(rows, "report_prodotti.csv")


@router.get("/export/sellers.csv")
def export_sellers(session=Depends(get_session)):
    rows = export_service.seller_report_rows(load_store(), now())
    return _csv_response(rows, "report_venditori.csv")


@router.post("/import/clients", response_model=ImportResultRead)
def import_clients(
    raw: bytes = Body(..., media_type="text/csv"), session=Depends(get_session)
):
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="CSV must be UTF-8 encoded")
    try:
        imported, errors = import_clients_csv(text)
    except CsvImportError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ImportResultRead(
        imported=imported,
        errors=[ImportRowErrorRead.model_validate(e) for e in errors],
    )
