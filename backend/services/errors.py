from typing import Optional


class ServiceError(Exception):
    """Base exception for service errors; carries the HTTP status to answer with"""
    def __init__(self, message: str, status_code: Optional[int] = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
