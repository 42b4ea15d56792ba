"""Transport-facing request handlers."""

from .handlers import ProcessHandler, ServiceResponse, UploadHandler

__all__ = ["ProcessHandler", "ServiceResponse", "UploadHandler"]
