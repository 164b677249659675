from typing import Any, Callable
from fastapi import FastAPI, status
from fastapi.requests import Request
from fastapi.responses import JSONResponse


class JewelryException(Exception):
    """This is the base class for all jewelry store errors"""
    error_code = "jewelry_error"
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidPeriodAnchor(JewelryException):
    """The report anchor is not a valid day, month, year or date range"""
    error_code = "invalid_period_anchor"
    status_code = status.HTTP_400_BAD_REQUEST


class DataFetchFailure(JewelryException):
    """Orders, users or products could not be fetched for a report"""
    error_code = "data_fetch_failure"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class NoDataForPeriod(JewelryException):
    """The selected period has no orders to export"""
    error_code = "no_data_for_period"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str = "No data to export for selected period"):
        super().__init__(message)


ANALYTICS_ERRORS = {
    exc_class.error_code: exc_class
    for exc_class in (InvalidPeriodAnchor, DataFetchFailure, NoDataForPeriod)
}


def exception_from_failure(error_code: str, message: str) -> JewelryException:
    """Rebuild the exception described by a failed analytics result."""
    exc_class = ANALYTICS_ERRORS.get(error_code, JewelryException)
    return exc_class(message)


def create_exception_handler(status_code: int, initial_detail: Any) -> Callable[[Request, Exception], JSONResponse]:
    async def exception_handler(request: Request, exc: JewelryException):
        content = dict(initial_detail)
        if str(exc):
            content["detail"] = str(exc)
        return JSONResponse(
            content=content,
            status_code=status_code
        )

    return exception_handler



def register_all_errors(app: FastAPI):
    # Invalid Period Anchor
    app.add_exception_handler(
        InvalidPeriodAnchor,
        create_exception_handler(
            status_code=InvalidPeriodAnchor.status_code,
            initial_detail={
                "message": "The selected report period is not valid",
                "error_code": InvalidPeriodAnchor.error_code,
                "resolution": "Use YYYY-MM-DD for days and ranges, YYYY-MM for months and YYYY for years"
            }
        )
    )

    # Data Fetch Failure
    app.add_exception_handler(
        DataFetchFailure,
        create_exception_handler(
            status_code=DataFetchFailure.status_code,
            initial_detail={
                "message": "Could not load store data for the report",
                "error_code": DataFetchFailure.error_code,
                "resolution": "Please try again later"
            }
        )
    )

    # No Data For Period
    app.add_exception_handler(
        NoDataForPeriod,
        create_exception_handler(
            status_code=NoDataForPeriod.status_code,
            initial_detail={
                "message": "No data to export for selected period",
                "error_code": NoDataForPeriod.error_code,
                "resolution": "Choose a period that contains orders"
            }
        )
    )

    @app.exception_handler(500)
    async def internal_server_error_handler(request, exc):
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "message": "Oops, something went wrong. Please try again later",
                "error_code": "server_error"
            }
        )

    @app.exception_handler(404)
    async def not_found_error_handler(request, exc):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={
                "message": "Resource not found",
                "error_code": "not_found",
                "resolution": "Check the URL or contact support"
            }
        )
