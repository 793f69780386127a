from __future__ import annotations

from typing import Dict, List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field


class ParsedData(BaseModel):
    """Rectangular result of one parse. Every row has column_count cells."""

    model_config = ConfigDict(frozen=True)

    headers: Tuple[str, ...] = ()
    rows: Tuple[Tuple[str, ...], ...] = ()
    column_count: int = Field(default=0, ge=0)
    row_count: int = Field(default=0, ge=0)

    @classmethod
    def empty(cls) -> ParsedData:
        return cls()


class DelimiterOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    character: str
    display_name: str

    def __str__(self) -> str:
        return self.display_name


class EncodingReport(BaseModel):
    detected: Optional[str] = None
    decode_used: str
    decode_fallback: bool = False


class DelimiterReport(BaseModel):
    detected: str
    used: str
    overridden: bool = False


class LoadReport(BaseModel):
    sha256: str
    size_bytes: int
    encoding: EncodingReport
    delimiter: DelimiterReport
    line_endings: Dict[str, int] = Field(default_factory=dict)
    has_header: bool = True


class ParseResponse(BaseModel):
    data: ParsedData
    report: LoadReport
    matches: List[int] = Field(default_factory=list)


class DetectResponse(BaseModel):
    delimiter: str
    option: DelimiterOption


class DelimitersResponse(BaseModel):
    delimiters: List[DelimiterOption]


class HealthResponse(BaseModel):
    ok: bool = True
