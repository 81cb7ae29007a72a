from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ReportFiltersModel(BaseModel):
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    status: Optional[str] = None
    product_category: Optional[str] = None
    top_n: int = 7


class ReportRequestModel(BaseModel):
    data: List[Dict[str, Any]] = Field(default_factory=list)
    filters: ReportFiltersModel = Field(default_factory=ReportFiltersModel)
    include_specs: bool = True


class MetaCategoriesResponse(BaseModel):
    categories: List[str]
