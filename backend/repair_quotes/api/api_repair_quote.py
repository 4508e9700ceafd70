from typing import Dict, List, NamedTuple
import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..database import get_db
from .. import schemas
from ..core.config import settings
from ..crud import crud_catalog, crud_work_order
from ..service_types.appliance_repair import (
    AdmissionError,
    CatalogService,
    LogisticsMode,
    LogisticsOverride,
    PricingConfig,
    QuoteTotals,
    Selection,
    admit_manual_part,
    admit_manual_service,
    compute_totals,
    suggest_combo,
)
from ..service_types.appliance_repair.pricing import apply_rate
from ..services import quote_message, warranty_pdf
from ..utils import error_response

router = APIRouter(tags=["repair-quotes"])
logger = logging.getLogger(__name__)


class QuoteContext(NamedTuple):
    selection: Selection
    catalog: List[CatalogService]
    config: PricingConfig
    totals: QuoteTotals


def _logistics_override(payload: schemas.LogisticsOverrideIn, config: PricingConfig) -> LogisticsOverride:
    if payload.mode is LogisticsMode.FORCED_ZERO:
        return LogisticsOverride.forced_zero()
    if payload.mode is LogisticsMode.FORCED_VALUE:
        cents = payload.cents if payload.cents is not None else config.supplier_logistics_fee_cents
        return LogisticsOverride.forced_value(cents)
    return LogisticsOverride.auto()


def _build_selection(payload: schemas.SelectionIn, db: Session, config: PricingConfig) -> Selection:
    """Turn a request payload into a Selection, admitting manual entries on the way."""
    equipment = payload.equipment_type
    selection = Selection.start(equipment)
    for sid in payload.service_ids:
        selection = selection.select_service(sid)

    available = {p.id: p for p in crud_catalog.get_parts_for_equipment(db, equipment)}
    for i, p in enumerate(payload.parts):
        part = available.get(p.part_id)
        if part is None:
            raise error_response(
                "Unknown part for this equipment",
                {f"parts.{i}.part_id": "not_found"},
            )
        selection = selection.add_part(part, p.margin_percent)
        added = selection.parts[-1]
        if p.needs_supplier_pickup is not None and p.needs_supplier_pickup != added.needs_supplier_pickup:
            selection = selection.toggle_part_supplier(len(selection.parts) - 1)

    try:
        for i, ms in enumerate(payload.manual_services):
            field = f"manual_services.{i}"
            selection = selection.add_manual_service(
                admit_manual_service(
                    ms.name,
                    ms.value,
                    labor_cents=ms.labor_cents,
                    warranty_days=ms.warranty_days,
                    entry_id=ms.id,
                )
            )
        for i, mp in enumerate(payload.manual_parts):
            field = f"manual_parts.{i}"
            selection = selection.add_manual_part(
                admit_manual_part(
                    mp.name,
                    mp.cost,
                    cost_cents=mp.cost_cents,
                    margin_percent=mp.margin_percent,
                    needs_supplier_pickup=mp.needs_supplier_pickup,
                    entry_id=mp.id,
                )
            )
    except AdmissionError as exc:
        logger.warning("Manual entry rejected; field=%s.%s error=%s", field, exc.field, exc.message)
        raise error_response(exc.message, {f"{field}.{exc.field}": "invalid"})

    return selection.set_logistics_override(_logistics_override(payload.logistics_override, config))


def _attach_combo(
    selection: Selection, payload: schemas.SelectionIn, totals: QuoteTotals, config: PricingConfig
) -> Selection:
    """Re-derive the submitted combo; it is only kept if it still matches this selection."""
    if payload.combo is None:
        return selection
    suggestion = suggest_combo(totals, config)
    submitted = payload.combo
    if (
        not suggestion.ok
        or suggestion.discounted_card_cents != submitted.discounted_card_cents
        or suggestion.discount_percent != submitted.discount_percent
    ):
        logger.info(
            "Dropping stale combo; submitted=%s%%/%s current=%s%%/%s",
            submitted.discount_percent,
            submitted.discounted_card_cents,
            suggestion.discount_percent,
            suggestion.discounted_card_cents,
        )
        return selection
    selection = selection.with_combo(suggestion)
    if payload.combo.active:
        selection = selection.activate_combo()
    return selection


def _load_context(payload: schemas.SelectionIn, db: Session) -> QuoteContext:
    config = crud_catalog.load_pricing_config(db)
    catalog = crud_catalog.get_active_services(db, payload.equipment_type)
    selection = _build_selection(payload, db, config)
    totals = compute_totals(selection, catalog, config)
    selection = _attach_combo(selection, payload, totals, config)
    return QuoteContext(selection, catalog, config, totals)


def _log_profit(ctx: QuoteContext) -> None:
    summary = quote_message.build_technician_summary(ctx.totals, ctx.selection, ctx.config)
    if summary["profit_health"] == quote_message.PROFIT_NEGATIVE:
        logger.info(
            "Quote below cost; equipment=%s card=%s real_profit=%s",
            ctx.totals.equipment_type.value,
            summary["effective_card_cents"],
            summary["effective_real_profit_cents"],
        )


@router.post("/quotes/preview", response_model=schemas.QuotePreviewOut)
def preview_quote(payload: schemas.QuoteRequest, db: Session = Depends(get_db)):
    ctx = _load_context(payload.selection, db)
    _log_profit(ctx)
    return schemas.QuotePreviewOut(
        totals=schemas.TotalsOut.model_validate(ctx.totals),
        customer=schemas.CustomerSummaryOut(
            **quote_message.build_customer_summary(ctx.totals, ctx.selection, ctx.config)
        ),
        technician=schemas.TechnicianSummaryOut(
            **quote_message.build_technician_summary(ctx.totals, ctx.selection, ctx.config)
        ),
    )


@router.post("/quotes/combo", response_model=schemas.ComboOut)
def suggest_quote_combo(payload: schemas.QuoteRequest, db: Session = Depends(get_db)):
    ctx = _load_context(payload.selection, db)
    suggestion = suggest_combo(ctx.totals, ctx.config)
    if not suggestion.ok:
        return schemas.ComboOut(
            ok=False,
            min_profit_cents=suggestion.min_profit_cents,
            reason=suggestion.rejected_reason,
        )
    return schemas.ComboOut(
        ok=True,
        discount_percent=suggestion.discount_percent,
        discounted_card_cents=suggestion.discounted_card_cents,
        discounted_pix_cents=apply_rate(suggestion.discounted_card_cents, ctx.config.pix_discount_rate),
        min_profit_cents=suggestion.min_profit_cents,
        profit_cents=suggestion.profit_cents,
    )


@router.post("/quotes/message", response_model=schemas.ClientMessageOut)
def client_message(payload: schemas.QuoteRequest, db: Session = Depends(get_db)):
    ctx = _load_context(payload.selection, db)
    message = quote_message.build_client_message(
        ctx.totals,
        ctx.selection,
        ctx.config,
        client_name=payload.client.client_name,
        company=settings.company(),
    )
    return schemas.ClientMessageOut(
        message=message,
        whatsapp_url=quote_message.whatsapp_url(message, payload.client.client_phone),
    )


@router.post("/quotes/warranty-pdf", response_class=Response)
def warranty_certificate(payload: schemas.QuoteRequest, db: Session = Depends(get_db)):
    ctx = _load_context(payload.selection, db)
    errors: Dict[str, str] = {}
    if not payload.client.client_name.strip():
        errors["client.client_name"] = "required"
    if not ctx.totals.services:
        errors["selection.service_ids"] = "required"
    if errors:
        raise error_response("Cannot issue a warranty certificate", errors)
    pdf_bytes = warranty_pdf.generate_warranty_pdf(
        ctx.totals, ctx.selection, payload.client, settings.company()
    )
    filename = warranty_pdf.warranty_pdf_filename(payload.client)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post(
    "/work-orders",
    response_model=schemas.WorkOrderCreated,
    status_code=status.HTTP_201_CREATED,
)
def create_work_order(payload: schemas.QuoteRequest, db: Session = Depends(get_db)):
    ctx = _load_context(payload.selection, db)
    try:
        data = crud_work_order.build_work_order_payload(
            ctx.totals, ctx.selection, payload.client, ctx.config
        )
    except ValueError as exc:
        raise error_response(str(exc), {"selection.service_ids": "required"})
    try:
        order = crud_work_order.create_work_order(db, data)
    except SQLAlchemyError:
        raise error_response(
            "Internal Server Error",
            {"work_order": "db_error"},
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    return schemas.WorkOrderCreated(
        id=order.id,
        status=order.status,
        diagnosis_charged_cents=order.diagnosis_charged_cents,
        card_cents=order.card_cents,
        services_count=len(order.services) + len(order.manual_services or []),
        parts_count=len(order.parts),
    )
