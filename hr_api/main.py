from __future__ import annotations

import logging
import math
from dataclasses import asdict
from typing import Any, Callable, Dict, Optional

import numpy as np
import pandas as pd
from fastapi import APIRouter, Depends, FastAPI, File, Query, Request, UploadFile
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from hr_api.schemas import DashboardFiltersModel, LoginRequest, RecordPayload
from hr_core.auth import authenticate
from hr_core.config import Settings, configure_logging, load_settings
from hr_core.csv_codec import CSVMode, export_csv, import_csv, read_upload
from hr_core.data import list_departments, prepare_context
from hr_core.errors import CSVImportError, RecordNotFoundError
from hr_core.filters import DashboardFilters, normalize_filters
from hr_core.metrics_employee import compute_employee_profile
from hr_core.metrics_overview import compute_overview
from hr_core.metrics_performance import compute_performance
from hr_core.metrics_retention import compute_retention
from hr_core.metrics_workforce import compute_workforce
from hr_core.records import coerce_form_values, generate_employee_id, new_employee
from hr_core.roles import identity_column, name_column, resolve_metric_columns
from hr_core.store import TableSnapshot, TabularStore

logger = logging.getLogger(__name__)
router = APIRouter()


def get_store(request: Request) -> TabularStore:
    return request.app.state.store


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def _json(data: object, status_code: int = 200) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except Exception:
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                np.ndarray: lambda arr: arr.tolist(),
            },
        ),
    )


def _error(status_code: int, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": str(exc), "type": type(exc).__name__})


def _snapshot_payload(snapshot: TableSnapshot) -> Dict[str, Any]:
    return {
        "headers": list(snapshot.headers),
        "records": list(snapshot.records),
        "version": snapshot.version,
        "identity_column": snapshot.identity_column,
    }


def _filters_from_model(model: DashboardFiltersModel, snapshot: TableSnapshot) -> DashboardFilters:
    raw = model.model_dump()
    return normalize_filters(raw, available_departments=list_departments(snapshot))


def _dashboard(name: str, compute: Callable[[DashboardFilters, Dict[str, Any]], Dict[str, Any]], filters: DashboardFiltersModel, store: TabularStore) -> JSONResponse:
    try:
        snapshot = store.get_snapshot()
        f = _filters_from_model(filters, snapshot)
        ctx = prepare_context(f, snapshot)
        return _json(compute(f, ctx))
    except Exception as exc:
        logger.exception("%s failed", name)
        return _error(500, exc)


# ---------------- Employees ----------------
@router.get("/employees")
def list_employees(store: TabularStore = Depends(get_store)):
    return _json(_snapshot_payload(store.get_snapshot()))


@router.get("/employees/{employee_id}")
def get_employee(employee_id: str, store: TabularStore = Depends(get_store)):
    record = store.find_by_identity(employee_id)
    if record is None:
        return _error(404, RecordNotFoundError(f"No employee with id {employee_id!r}."))
    return _json({"record": record})


@router.post("/employees", status_code=201)
def add_employee(payload: Optional[RecordPayload] = None, store: TabularStore = Depends(get_store)):
    snapshot = store.get_snapshot()
    key = snapshot.identity_column
    if payload is None or not payload.record:
        existing = [r.get(key) for r in snapshot.records] if key else []
        record = new_employee(snapshot.headers, existing)
    else:
        record = {h: "" for h in snapshot.headers}
        record.update({k: ("" if v is None else v) for k, v in payload.record.items()})
        key = key or identity_column(list(record))
        if key and str(record.get(key, "")).strip() == "":
            record[key] = generate_employee_id(r.get(key) for r in snapshot.records)
    store.add_record(record)
    logger.info("Added employee %s", record.get(key) if key else "")
    return _json({"record": record}, status_code=201)


@router.put("/employees/{employee_id}")
def update_employee(employee_id: str, payload: RecordPayload, store: TabularStore = Depends(get_store)):
    existing = store.find_by_identity(employee_id)
    if existing is None:
        return _error(404, RecordNotFoundError(f"No employee with id {employee_id!r}."))
    updated = coerce_form_values(existing, payload.record)
    store.update_by_identity(updated)
    logger.info("Updated employee %s", employee_id)
    return _json({"record": updated})


@router.delete("/employees/{employee_id}")
def delete_employee(employee_id: str, store: TabularStore = Depends(get_store)):
    removed = store.remove_by_identity(employee_id)
    if removed is None:
        return _error(404, RecordNotFoundError(f"No employee with id {employee_id!r}."))
    logger.info("Removed employee %s", employee_id)
    return _json({"record": removed})


# ---------------- Data operations ----------------
@router.get("/export")
def export_employees(store: TabularStore = Depends(get_store)):
    export = export_csv(store)
    return Response(
        content=export.content.encode("utf-8"),
        media_type=export.mime_type,
        headers={"Content-Disposition": f"attachment; filename={export.filename}"},
    )


@router.post("/import")
async def import_employees(
    file: UploadFile = File(...),
    mode: Optional[CSVMode] = Query(default=None),
    store: TabularStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    chosen = mode or settings.csv_mode
    try:
        text = await read_upload(file.read, settings.upload_timeout_seconds)
        result = import_csv(store, text, chosen)
    except CSVImportError as exc:
        logger.warning("Import of %s rejected: %s", file.filename, exc)
        return _error(400, exc)
    except Exception as exc:
        logger.exception("import failed")
        return _error(500, exc)
    return _json({"imported": len(result.records), "headers": result.headers, "mode": chosen.value})


@router.post("/reset")
def reset_employees(store: TabularStore = Depends(get_store)):
    return _json(_snapshot_payload(store.reset()))


# ---------------- Meta ----------------
@router.get("/meta/departments")
def meta_departments(store: TabularStore = Depends(get_store)):
    return _json({"values": list_departments(store.get_snapshot())})


@router.get("/meta/columns")
def meta_columns(store: TabularStore = Depends(get_store)):
    headers = list(store.get_snapshot().headers)
    return _json(
        {
            "headers": headers,
            "identity": identity_column(headers),
            "name": name_column(headers),
            "metrics": asdict(resolve_metric_columns(headers)),
        }
    )


# ---------------- Dashboard ----------------
@router.post("/overview")
def overview(filters: DashboardFiltersModel, store: TabularStore = Depends(get_store)):
    return _dashboard("overview", compute_overview, filters, store)


@router.post("/performance")
def performance(filters: DashboardFiltersModel, store: TabularStore = Depends(get_store)):
    return _dashboard("performance", compute_performance, filters, store)


@router.post("/workforce")
def workforce(filters: DashboardFiltersModel, store: TabularStore = Depends(get_store)):
    return _dashboard("workforce", compute_workforce, filters, store)


@router.post("/retention")
def retention(filters: DashboardFiltersModel, store: TabularStore = Depends(get_store)):
    return _dashboard("retention", compute_retention, filters, store)


# ---------------- Session ----------------
@router.post("/login")
def login(body: LoginRequest, store: TabularStore = Depends(get_store), settings: Settings = Depends(get_settings)):
    user = authenticate(store, body.username, body.password, settings)
    if user is None:
        return JSONResponse(status_code=401, content={"error": "Invalid username or password.", "type": "AuthenticationError"})
    return _json({"username": user.username, "role": user.role, "employee": user.employee})


@router.get("/me/{employee_id}")
def my_performance(employee_id: str, store: TabularStore = Depends(get_store)):
    record = store.find_by_identity(employee_id)
    if record is None:
        return _error(404, RecordNotFoundError("Could not find performance data for your account."))
    return _json(compute_employee_profile(record))


def create_app(settings: Optional[Settings] = None, store: Optional[TabularStore] = None) -> FastAPI:
    settings = settings or load_settings()
    app = FastAPI(title="HR Analytics Dashboard API", version="0.1.0")
    app.state.settings = settings
    app.state.store = store if store is not None else TabularStore()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)
    return app


configure_logging(load_settings().log_level)
app = create_app()
