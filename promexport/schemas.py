#!/usr/bin/env python3
"""
promexport API Schemas - Pydantic Models for query_range Response Validation
"""

from typing import Any, Dict, List, Optional, Tuple
from pydantic import BaseModel, Field


class ResponseData(BaseModel):
    resultType: str
    # Validated per series once the result type is known to be a matrix
    result: List[Any] = Field(default_factory=list)


class QueryRangeResponse(BaseModel):
    status: str
    data: ResponseData
    warnings: Optional[List[str]] = None


class MatrixSeries(BaseModel):
    metric: Dict[str, str] = Field(default_factory=dict)
    values: List[Tuple[float, str]]  # [unix timestamp, value as string]
