"""FastAPI application for comparing two Excel workbooks."""

import uuid
from datetime import UTC, datetime
from typing import Annotated, Any

from fastapi import (
    FastAPI,
    File,
    Form,
    HTTPException,
    Request,
    UploadFile,
    status,
)
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from excel_comparer import __version__
from excel_comparer.config import settings, validate_settings_on_startup
from excel_comparer.models import (
    CompareResponse,
    ErrorDetail,
    HealthResponse,
    WorkbookSummary,
)
from excel_comparer.services.comparison_service import (
    ComparisonCache,
    ComparisonOutcome,
    ComparisonService,
)
from excel_comparer.services.report import differences_to_csv
from excel_comparer.utils.exceptions import (
    ComparerError,
    ErrorCode,
    FileTooLargeError,
    ValidationError,
)
from excel_comparer.utils.logging import (
    clear_context,
    configure_logging,
    get_logger,
    get_request_id,
    set_request_id,
)

configure_logging(
    level=settings.log_level_int,
    use_structured_formatter=True,
)
logger = get_logger(__name__)


async def _read_upload(upload: UploadFile | None, field: str) -> tuple[bytes, str]:
    """Read an uploaded workbook, enforcing presence and size limits."""
    if upload is None or not upload.filename:
        raise ValidationError(
            message=f"A workbook file must be provided as '{field}'",
            field=field,
            error_code=ErrorCode.MISSING_FILE,
        )

    content = await upload.read()
    if len(content) > settings.max_file_size_bytes:
        logger.warning(
            "File too large",
            field=field,
            file_size=len(content),
            max_size=settings.max_file_size_bytes,
        )
        raise FileTooLargeError(
            file_size=len(content),
            max_size=settings.max_file_size_bytes,
            file_path=upload.filename,
        )
    return content, upload.filename


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Excel Comparer API",
        description=(
            "Compares two Excel workbooks sheet by sheet and cell by cell, "
            "reporting added, removed and modified values below a header row."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    validate_settings_on_startup(settings)

    app.state.comparison_service = ComparisonService(
        cache=ComparisonCache(max_entries=settings.cache_max_entries)
    )

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next: Any) -> Any:
        """Assign a request ID, expose it in logs and the response headers."""
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
        set_request_id(request_id)
        request.state.request_id = request_id

        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            clear_context()

    @app.exception_handler(ComparerError)
    async def comparer_exception_handler(
        request: Request, exc: ComparerError
    ) -> JSONResponse:
        request_id = getattr(request.state, "request_id", get_request_id())
        logger.error(
            f"Comparer Error: {exc.message}",
            error_code=exc.error_code.value,
            http_status=exc.http_status,
        )
        return JSONResponse(
            status_code=exc.http_status,
            content=ErrorDetail(
                detail=exc.message,
                error_code=exc.error_code.value,
                details=exc.details if exc.details else None,
                request_id=request_id,
            ).model_dump(exclude_none=True),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request, exc: HTTPException
    ) -> JSONResponse:
        request_id = getattr(request.state, "request_id", get_request_id())
        logger.warning(
            f"HTTP Error: {exc.detail}",
            status_code=exc.status_code,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorDetail(
                detail=str(exc.detail),
                request_id=request_id,
            ).model_dump(exclude_none=True),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Catch-all handler that hides internals unless debug is on."""
        request_id = getattr(request.state, "request_id", get_request_id())
        logger.exception(
            f"Unexpected error: {type(exc).__name__}",
            error_type=type(exc).__name__,
        )
        if settings.debug:
            detail = f"Internal server error: {type(exc).__name__}: {exc}"
        else:
            detail = "Internal server error. Please try again later."

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorDetail(
                detail=detail,
                error_code=ErrorCode.INTERNAL_ERROR.value,
                request_id=request_id,
            ).model_dump(exclude_none=True),
        )

    async def _compare_uploads(
        request: Request,
        file1: UploadFile | None,
        file2: UploadFile | None,
        header_row: int | None,
    ) -> tuple[ComparisonOutcome, str, str]:
        content1, name1 = await _read_upload(file1, "file1")
        content2, name2 = await _read_upload(file2, "file2")
        effective_header_row = (
            settings.default_header_row if header_row is None else header_row
        )

        service: ComparisonService = request.app.state.comparison_service
        outcome = await run_in_threadpool(
            service.compare_files,
            content1,
            name1,
            content2,
            name2,
            header_row=effective_header_row,
        )
        logger.info(
            "Workbooks compared",
            file1=name1,
            file2=name2,
            header_row=outcome.result.header_row,
            total_differences=outcome.result.total_differences,
            cache_hit=outcome.cache_hit,
        )
        return outcome, name1, name2

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check(request: Request) -> dict[str, Any]:
        """Check the health status of the service."""
        logger.debug("Health check requested")
        return {
            "status": "healthy",
            "timestamp": datetime.now(UTC).isoformat(),
            "version": __version__,
        }

    @app.post(
        "/compare",
        response_model=CompareResponse,
        tags=["Comparison"],
        responses={
            400: {"model": ErrorDetail, "description": "Missing or unsupported file"},
            413: {"model": ErrorDetail, "description": "File too large"},
            422: {"model": ErrorDetail, "description": "Unreadable workbook"},
        },
    )
    async def compare(
        request: Request,
        file1: Annotated[
            UploadFile | None, File(description="First (baseline) workbook")
        ] = None,
        file2: Annotated[
            UploadFile | None, File(description="Second (changed) workbook")
        ] = None,
        header_row: Annotated[
            int | None,
            Form(description="1-based header row; values below 1 mean row 1"),
        ] = None,
    ) -> CompareResponse:
        """Compare two uploaded workbooks across all of their sheets.

        Sheets present in only one workbook are reported with every
        non-empty data cell as added or removed.
        """
        outcome, name1, name2 = await _compare_uploads(
            request, file1, file2, header_row
        )
        result = outcome.result
        return CompareResponse(
            file1=WorkbookSummary(name=name1, sheet_count=outcome.file1_sheet_count),
            file2=WorkbookSummary(name=name2, sheet_count=outcome.file2_sheet_count),
            header_row=result.header_row,
            total_differences=result.total_differences,
            sheets_compared=len(result.sheets),
            sheets_with_differences=len(result.sheets_with_differences),
            active_sheet=result.active_sheet,
            sheets=list(result.sheets),
        )

    @app.post(
        "/compare/report",
        response_class=PlainTextResponse,
        tags=["Comparison"],
        responses={
            200: {"content": {"text/csv": {}}, "description": "CSV report"},
            400: {"model": ErrorDetail, "description": "Missing or unsupported file"},
            413: {"model": ErrorDetail, "description": "File too large"},
            422: {"model": ErrorDetail, "description": "Unreadable workbook"},
        },
    )
    async def compare_report(
        request: Request,
        file1: Annotated[
            UploadFile | None, File(description="First (baseline) workbook")
        ] = None,
        file2: Annotated[
            UploadFile | None, File(description="Second (changed) workbook")
        ] = None,
        header_row: Annotated[
            int | None,
            Form(description="1-based header row; values below 1 mean row 1"),
        ] = None,
    ) -> PlainTextResponse:
        """Compare two uploaded workbooks and return the differences as CSV."""
        outcome, _, _ = await _compare_uploads(request, file1, file2, header_row)
        csv_text = await run_in_threadpool(differences_to_csv, outcome.result)
        return PlainTextResponse(
            csv_text,
            media_type="text/csv",
            headers={
                "Content-Disposition": 'attachment; filename="differences.csv"'
            },
        )

    logger.info("FastAPI application created successfully")
    return app


app = create_app()
