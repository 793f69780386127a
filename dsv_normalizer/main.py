import logging
from typing import Optional

from fastapi import FastAPI, UploadFile, File, HTTPException, Query
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response

from .detect import (
    COMMON_DELIMITERS,
    delimiter_option,
    detect_delimiter,
    file_extension,
    resolve_delimiter,
)
from .errors import DSVError, UnsupportedFileError, UploadTooLargeError
from .export import export_filename, to_csv
from .models import (
    DelimitersResponse,
    DetectResponse,
    HealthResponse,
    ParseResponse,
)
from .normalize import decode_bytes, load_bytes
from .rules import SUPPORTED_EXTENSIONS, configure_logging, max_upload_bytes
from .table import search_rows, sort_rows

logger = logging.getLogger(__name__)
configure_logging()

app = FastAPI(
    title="dsv-normalizer",
    description="Quote-aware parsing of delimiter-separated text into normalized tables",
    version="0.1.0",
)


def _check_file_name(file: UploadFile) -> str:
    name = file.filename or ""
    if file_extension(name) not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFileError(
            "Only delimiter-separated files are supported ("
            + ", ".join("." + e for e in SUPPORTED_EXTENSIONS)
            + ")"
        )
    return name


def _check_size(size: Optional[int]) -> None:
    limit = max_upload_bytes()
    if size is not None and size > limit:
        raise UploadTooLargeError(f"Upload is {size} bytes, limit is {limit}")


async def _read_upload(file: UploadFile) -> tuple[str, bytes]:
    name = _check_file_name(file)
    # size is unknown for some clients, so check again after reading
    _check_size(file.size)
    raw = await file.read()
    _check_size(len(raw))
    return name, raw


def _http_error(exc: DSVError) -> HTTPException:
    logger.info("rejected request: %s", exc.message)
    return HTTPException(status_code=exc.status_code, detail=exc.message)


def _delimiter_or_none(value: Optional[str]) -> Optional[str]:
    return None if value is None else resolve_delimiter(value)


def _detect_upload(raw: bytes, name: str) -> DetectResponse:
    text, _ = decode_bytes(raw)
    delimiter = detect_delimiter(text, name)
    return DetectResponse(delimiter=delimiter, option=delimiter_option(delimiter))


def _parse_upload(
    raw: bytes,
    name: str,
    delimiter: Optional[str],
    has_header: bool,
    sort_column: Optional[int],
    descending: bool,
    query: Optional[str],
    case_sensitive: bool,
) -> ParseResponse:
    result = load_bytes(raw, name, delimiter, has_header)
    data = result.data
    if sort_column is not None:
        data = sort_rows(data, sort_column, ascending=not descending)
    matches = search_rows(data, query, case_sensitive) if query else []
    return ParseResponse(data=data, report=result.report, matches=matches)


def _export_upload(raw: bytes, name: str, delimiter: Optional[str], has_header: bool) -> str:
    return to_csv(load_bytes(raw, name, delimiter, has_header).data)


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.get("/delimiters", response_model=DelimitersResponse)
def delimiters():
    return DelimitersResponse(delimiters=list(COMMON_DELIMITERS))


@app.post("/detect", response_model=DetectResponse)
async def detect(file: UploadFile = File(...)):
    try:
        name, raw = await _read_upload(file)
    except DSVError as e:
        raise _http_error(e)

    return await run_in_threadpool(_detect_upload, raw, name)


@app.post("/parse", response_model=ParseResponse)
async def parse_file(
    file: UploadFile = File(...),
    delimiter: Optional[str] = Query(default=None),
    has_header: bool = Query(default=True),
    sort_column: Optional[int] = Query(default=None),
    descending: bool = Query(default=False),
    query: Optional[str] = Query(default=None),
    case_sensitive: bool = Query(default=False),
):
    try:
        name, raw = await _read_upload(file)
        chosen = _delimiter_or_none(delimiter)
        return await run_in_threadpool(
            _parse_upload,
            raw, name, chosen, has_header, sort_column, descending, query, case_sensitive,
        )
    except DSVError as e:
        raise _http_error(e)


@app.post("/export")
async def export_csv(
    file: UploadFile = File(...),
    delimiter: Optional[str] = Query(default=None),
    has_header: bool = Query(default=True),
):
    try:
        name, raw = await _read_upload(file)
        chosen = _delimiter_or_none(delimiter)
    except DSVError as e:
        raise _http_error(e)

    body = await run_in_threadpool(_export_upload, raw, name, chosen, has_header)
    return Response(
        content=body,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{export_filename(name)}"'},
    )
