import asyncio
import errno
from typing import Any, Awaitable, Callable, Coroutine, Dict, Mapping, Optional, Sequence

import aiohttp
import ujson

from btcchina.connector.btc_china import btc_china_constants as CONSTANTS
from btcchina.core.web_assistant.auth import AuthBase
from btcchina.core.web_assistant.connections.data_types import RESTRequest
from btcchina.core.web_assistant.rest_assistant import RESTAssistant
from btcchina.core.web_assistant.rest_pre_processors import UserAgentRESTPreProcessor
from btcchina.core.web_assistant.web_assistants_factory import WebAssistantsFactory
from btcchina.exceptions import (
    BTCChinaAPIError,
    BTCChinaHTTPStatusError,
    BTCChinaParseError,
    BTCChinaTransportError,
    BTCChinaValidationError,
)

TRANSPORT_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError, OSError)


def public_rest_url(method: str, server: str = CONSTANTS.REST_URL) -> str:
    """
    Creates a full URL for provided public data method
    :param method: the public data method (ticker, orderbook, ...)
    :param server: the api server base URL. Ignored for trades, which are only served by the data mirror
    :return: the full URL to the endpoint
    """
    base_url = CONSTANTS.DATA_MIRROR_URL if method == CONSTANTS.TRADES_METHOD else server
    return base_url + CONSTANTS.PUBLIC_PATH_URL.format(method=method)


def private_rest_url(server: str = CONSTANTS.REST_URL) -> str:
    return server + CONSTANTS.PRIVATE_PATH_URL


def private_request_description(url: str, tonce: int, method: str, params: Sequence[Any]) -> str:
    return f"POST request to url {url} with tonce {tonce}, method {method} and params {ujson.dumps(params)}"


def public_request_description(url: str, params: Mapping[str, Any]) -> str:
    return f"GET request to url {url} with parameters {ujson.dumps(params)}"


def build_api_factory(auth: Optional[AuthBase] = None) -> WebAssistantsFactory:
    api_factory = WebAssistantsFactory(
        auth=auth,
        rest_pre_processors=[UserAgentRESTPreProcessor(user_agent=CONSTANTS.USER_AGENT)])
    return api_factory


def transport_error_code(error: BaseException) -> str:
    if isinstance(error, asyncio.TimeoutError):
        return "ETIMEDOUT"
    error_number = getattr(error, "errno", None)
    if isinstance(error_number, int):
        return errno.errorcode.get(error_number, str(error_number))
    return type(error).__name__


def response_snippet(body: Any) -> str:
    snippet = str(body)
    if len(snippet) > CONSTANTS.RESPONSE_SNIPPET_LENGTH:
        snippet = f"{snippet[:CONSTANTS.RESPONSE_SNIPPET_LENGTH]} ... (truncated)"
    return snippet


def raise_for_transport_and_status(request_description: str,
                                   status: Optional[int] = None,
                                   status_message: Optional[str] = None,
                                   transport_error: Optional[BaseException] = None):
    if transport_error is not None:
        code = transport_error_code(transport_error)
        raise BTCChinaTransportError(
            f"Failed {request_description}. Error code {code}: {transport_error!r}",
            code=code,
            request_description=request_description) from transport_error

    if status is None or not 200 <= status < 300:
        raise BTCChinaHTTPStatusError(
            f"HTTP status code {status} returned from {request_description}. Status message: {status_message}",
            status_code=status,
            status_message=status_message,
            request_description=request_description)


def normalize_response(request_description: str,
                       status: Optional[int] = None,
                       status_message: Optional[str] = None,
                       body: Any = None,
                       transport_error: Optional[BaseException] = None) -> Any:
    """
    Classifies the raw outcome of a request. The first matching rule wins:
    transport failure, status outside [200, 300), body that is not a JSON object or array,
    body carrying an `error` field. Anything else is a success and the parsed body is returned.

    :param request_description: what was attempted, included in every error message
    :param status: the HTTP status code, when a response was received
    :param status_message: the HTTP reason phrase
    :param body: the response text, or an already parsed body
    :param transport_error: the exception raised by the transport, if any

    :return: the parsed response body
    """
    raise_for_transport_and_status(request_description, status, status_message, transport_error)

    data = body
    if isinstance(body, (str, bytes)):
        try:
            data = ujson.loads(body)
        except ValueError:
            data = None
    if not isinstance(data, (dict, list)):
        raise BTCChinaParseError(
            f"Could not parse response from {request_description}. "
            f"HTTP status code {status}. Response: {response_snippet(body)}",
            body=body,
            request_description=request_description)

    if isinstance(data, dict) and "error" in data:
        error = data["error"]
        if isinstance(error, dict):
            code, message = error.get("code"), error.get("message")
        else:
            code, message = None, error
        raise BTCChinaAPIError(
            f"API returned error code {code} from {request_description}. Error message: {message}",
            code=code,
            api_message=message,
            request_description=request_description)

    return data


async def api_request(rest_assistant: RESTAssistant,
                      request: RESTRequest,
                      request_description: str,
                      timeout: Optional[float] = None) -> Any:
    """
    Sends exactly one request and returns the normalized result.
    Raises one of the `BTCChinaError` subclasses on failure.
    """
    try:
        response = await rest_assistant.call(request=request, timeout=timeout)
        body = await response.text()
    except TRANSPORT_ERRORS as e:
        raise_for_transport_and_status(request_description, transport_error=e)

    return normalize_response(
        request_description,
        status=response.status,
        status_message=response.reason,
        body=body)


def deliver_to_handler(handler: Callable[[Optional[Exception], Any], None],
                       coroutine: Coroutine[Any, Any, Any]) -> Awaitable[None]:
    """
    Adapts a client coroutine to a `handler(error, data)` result handler.
    The handler is validated before anything is awaited. Once awaited, it is called exactly once,
    either with `(None, data)` or with `(error, None)`. The error is a `BTCChinaError` for every failure the
    client classifies; any other exception raised by the coroutine is delivered as is.
    """
    if not callable(handler):
        coroutine.close()
        raise BTCChinaValidationError(f"The result handler {handler!r} must be a callable taking error and data.")
    return _deliver(handler, coroutine)


async def _deliver(handler: Callable[[Optional[Exception], Any], None],
                   coroutine: Coroutine[Any, Any, Any]):
    try:
        data = await coroutine
    except Exception as e:
        # cancellation is a BaseException and is not delivered
        handler(e, None)
        return
    handler(None, data)


def build_envelope(method: str, params: Sequence[Any]) -> Dict[str, Any]:
    return {"method": method, "params": list(params), "id": CONSTANTS.JSON_RPC_ID}
