from __future__ import annotations

import logging
import math

import numpy as np
import pandas as pd
from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from api.schemas import MetaCategoriesResponse, ReportRequestModel
from report_charts.chart_config import get_chart_config, get_color_scheme
from report_charts.data import CATEGORIES
from report_charts.filters import ReportFilters, apply_filters, normalize_filters
from report_charts.pipeline import prepare_bar_chart_data, prepare_line_chart_data, prepare_pie_chart_data
from report_charts.report import compute_report


app = FastAPI(title="Artisan Report Charts API", version="0.1.0")
logger = logging.getLogger(__name__)

CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _filters_from_request(request: ReportRequestModel) -> ReportFilters:
    return normalize_filters(request.filters.model_dump())


def _error(exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": str(exc), "type": type(exc).__name__})


def _json(data: object) -> JSONResponse:
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
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                np.ndarray: lambda arr: arr.tolist(),
                pd.Timestamp: lambda ts: ts.isoformat(),
            },
        )
    )


@app.get("/meta/categories", response_model=MetaCategoriesResponse)
def meta_categories():
    return _json({"categories": list(CATEGORIES)})


@app.get("/config/{category}")
def chart_config(category: str):
    try:
        return _json(
            {
                "category": category,
                "config": get_chart_config(category).to_dict(),
                "colors": get_color_scheme(category).to_dict(),
            }
        )
    except Exception as exc:
        logger.exception("chart_config failed")
        return _error(exc)


@app.post("/reports/{category}")
def report(category: str, request: ReportRequestModel):
    try:
        f = _filters_from_request(request)
        return _json(compute_report(category, request.data, filters=f, include_specs=request.include_specs))
    except Exception as exc:
        logger.exception("report failed")
        return _error(exc)


@app.post("/reports/{category}/bar")
def report_bar(category: str, request: ReportRequestModel):
    try:
        f = _filters_from_request(request)
        rows = apply_filters(category, request.data, f)
        return _json(prepare_bar_chart_data(category, rows, top_n=f.top_n).to_dict())
    except Exception as exc:
        logger.exception("report_bar failed")
        return _error(exc)


@app.post("/reports/{category}/pie")
def report_pie(category: str, request: ReportRequestModel):
    try:
        rows = apply_filters(category, request.data, _filters_from_request(request))
        return _json({"slices": [s.to_dict() for s in prepare_pie_chart_data(category, rows)]})
    except Exception as exc:
        logger.exception("report_pie failed")
        return _error(exc)


@app.post("/reports/{category}/line")
def report_line(category: str, request: ReportRequestModel):
    try:
        rows = apply_filters(category, request.data, _filters_from_request(request))
        return _json(prepare_line_chart_data(category, {"data": rows}).to_dict())
    except Exception as exc:
        logger.exception("report_line failed")
        return _error(exc)


@app.post("/export/{category}")
def export_report(category: str, request: ReportRequestModel):
    rows = apply_filters(category, request.data, _filters_from_request(request))
    export_df = pd.DataFrame(rows)
    filename = f"{category}_report.csv"
    csv_bytes = export_df.to_csv(index=False).encode("utf-8")
    return Response(content=csv_bytes, media_type="text/csv", headers={"Content-Disposition": f"attachment; filename={filename}"})
