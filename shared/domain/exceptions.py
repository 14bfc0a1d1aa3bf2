"""
Domain Exceptions

Errors raised by the domain services. They carry the HTTP status and the
extra payload the API exposes, but do not depend on DRF; the mapping to
responses lives in ``shared.infrastructure.exception_handler``.
"""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base class for errors the API reports to the caller"""

    status_code = 400
    default_code = 'error'
    default_message = 'La solicitud no pudo procesarse.'

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ):
        self.message = message or self.default_message
        self.code = code or self.default_code
        self.extra = extra or {}
        super().__init__(self.message)

    def payload(self) -> Dict[str, Any]:
        data = {'detail': self.message, 'code': self.code}
        data.update(self.extra)
        return data
