"""Error types raised by route handlers and the handlers that render them."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

PROBLEM_JSON = "application/problem+json"
VALIDATION_PROBLEM_TYPE = "https://tools.ietf.org/html/rfc9110#section-15.5.1"
VALIDATION_PROBLEM_TITLE = "One or more validation errors occurred."

SAVE_FAILED = "An error occurred while saving the changes"


class ValidationProblem(Exception):
    """Input failed field constraints. ``errors`` maps field name to messages."""

    def __init__(self, errors: dict[str, list[str]]):
        super().__init__(errors)
        self.errors = errors


class NotFound(Exception):
    """Requested resource does not exist. Rendered as an empty 404."""


def validation_problem_response(errors: dict[str, list[str]]) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        media_type=PROBLEM_JSON,
        content={
            "type": VALIDATION_PROBLEM_TYPE,
            "title": VALIDATION_PROBLEM_TITLE,
            "status": 400,
            "errors": errors,
        },
    )


async def _handle_validation_problem(request: Request, exc: ValidationProblem) -> JSONResponse:
    return validation_problem_response(exc.errors)


async def _handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Imported here to avoid a cycle; validation depends on this module
    from player_api.core.validation import collect_errors

    return validation_problem_response(collect_errors(exc.errors()))


async def _handle_not_found(request: Request, exc: NotFound) -> Response:
    return Response(status_code=404)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationProblem, _handle_validation_problem)
    app.add_exception_handler(RequestValidationError, _handle_request_validation)
    app.add_exception_handler(NotFound, _handle_not_found)
