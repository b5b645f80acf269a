from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from sqlalchemy.exc import SQLAlchemyError
from datapipe.logging.logger import get_logger
from .response import ResponseModel
from datapipe.exceptions import DataPipeError

logger = get_logger("exception_handler")

def global_exception_handler(request: Request, exc: Exception):
    """Translate datapipe and store errors into the response envelope."""
    path = request.url.path

    if isinstance(exc, DataPipeError):
        logger.warning(f"Path[{path}] - DataPipeError: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content=ResponseModel.fail(code=exc.code, message=exc.message, data=jsonable_encoder(exc.detail))
        )

    if isinstance(exc, RequestValidationError):
        logger.error(f"Path[{path}] - ValidationError: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=ResponseModel.fail(code=422, message="Invalid request parameters", data=jsonable_encoder(exc.errors()))
        )

    if isinstance(exc, SQLAlchemyError):
        logger.critical(f"Path[{path}] - DatabaseError: {str(exc)}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ResponseModel.fail(code=500, message="Service temporarily unavailable")
        )

    logger.opt(exception=True).error(f"Path[{path}] - UncaughtException: {str(exc)}")

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ResponseModel.fail(code=500, message="System busy, please try again later")
    )

def register_exception_handlers(app: FastAPI):
    """Route datapipe, validation and store errors through the envelope handler."""
    app.add_exception_handler(DataPipeError, global_exception_handler)
    app.add_exception_handler(RequestValidationError, global_exception_handler)
    app.add_exception_handler(SQLAlchemyError, global_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
