from asyncio import wait_for
from copy import deepcopy
from typing import List, Optional

from btcchina.core.web_assistant.auth import AuthBase
from btcchina.core.web_assistant.connections.data_types import RESTRequest, RESTResponse
from btcchina.core.web_assistant.connections.rest_connection import RESTConnection
from btcchina.core.web_assistant.rest_pre_processors import RESTPreProcessorBase


class RESTAssistant:
    """A helper class to contain all REST-related logic.

    The class can be injected with additional functionality by passing a list of objects inheriting from
    the `RESTPreProcessorBase` class. The pre-processors are applied to a request before it is sent out,
    and the auth (if any) is applied last, so the signature covers the final request.

    The assistant performs exactly one HTTP call per `call` invocation and returns the raw response;
    classifying it is up to the caller.
    """
    def __init__(
        self,
        connection: RESTConnection,
        rest_pre_processors: Optional[List[RESTPreProcessorBase]] = None,
        auth: Optional[AuthBase] = None,
    ):
        self._connection = connection
        self._rest_pre_processors = rest_pre_processors or []
        self._auth = auth

    async def call(self, request: RESTRequest, timeout: Optional[float] = None) -> RESTResponse:
        request = deepcopy(request)
        request = await self._pre_process_request(request)
        request = await self._authenticate(request)
        resp = await wait_for(self._connection.call(request), timeout)
        return resp

    async def _pre_process_request(self, request: RESTRequest) -> RESTRequest:
        for pre_processor in self._rest_pre_processors:
            request = await pre_processor.pre_process(request)
        return request

    async def _authenticate(self, request: RESTRequest) -> RESTRequest:
        if self._auth is not None and request.is_auth_required:
            request = await self._auth.rest_authenticate(request)
        return request
