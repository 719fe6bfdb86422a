"""
Exceptions used in the btcchina codebase.

Every failure of a request made through the client is reported as one of the
`BTCChinaError` subclasses below. The `kind` attribute is the closed
classification of the failure so callers can branch without isinstance chains.
"""
from enum import Enum
from typing import Any, Optional


class ErrorKind(Enum):
    VALIDATION = "Validation"
    TRANSPORT = "Transport"
    HTTP_STATUS = "HttpStatus"
    PARSE = "Parse"
    API_ERROR = "ApiError"

    def __str__(self):
        return self.value


class BTCChinaError(Exception):
    """
    Most errors raised in btcchina should inherit this class so we can
    differentiate them from errors that come from dependencies.
    """
    kind: ErrorKind

    def __init__(self, message: str, request_description: Optional[str] = None):
        super().__init__(message)
        self.request_description = request_description


class BTCChinaValidationError(BTCChinaError, ValueError):
    """
    Malformed caller input, detected before any network I/O
    """
    kind = ErrorKind.VALIDATION


class BTCChinaTransportError(BTCChinaError, IOError):
    """
    DNS, connection or timeout failure; the server never produced a response
    """
    kind = ErrorKind.TRANSPORT

    def __init__(self, message: str, code: str, request_description: Optional[str] = None):
        super().__init__(message, request_description)
        self.code = code


class BTCChinaHTTPStatusError(BTCChinaError, IOError):
    """
    The server answered with a status code outside of [200, 300)
    """
    kind = ErrorKind.HTTP_STATUS

    def __init__(self,
                 message: str,
                 status_code: int,
                 status_message: Optional[str] = None,
                 request_description: Optional[str] = None):
        super().__init__(message, request_description)
        self.status_code = status_code
        self.status_message = status_message


class BTCChinaParseError(BTCChinaError):
    """
    The body could not be turned into the expected structure (JSON object or rates table)
    """
    kind = ErrorKind.PARSE

    def __init__(self, message: str, body: Any = None, request_description: Optional[str] = None):
        super().__init__(message, request_description)
        self.body = body


class BTCChinaAPIError(BTCChinaError):
    """
    A well formed response carrying an `error` field
    """
    kind = ErrorKind.API_ERROR

    def __init__(self, message: str, code: Any, api_message: Any, request_description: Optional[str] = None):
        super().__init__(message, request_description)
        self.code = code
        self.api_message = api_message
