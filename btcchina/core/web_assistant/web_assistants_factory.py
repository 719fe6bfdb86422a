from typing import List, Optional

import aiohttp

from btcchina.core.web_assistant.auth import AuthBase
from btcchina.core.web_assistant.connections.rest_connection import RESTConnection
from btcchina.core.web_assistant.rest_assistant import RESTAssistant
from btcchina.core.web_assistant.rest_pre_processors import RESTPreProcessorBase


class WebAssistantsFactory:
    """Creates `RESTAssistant` instances sharing a single `aiohttp.ClientSession`.

    The session is created lazily on the first `get_rest_assistant` call so the factory itself can be
    built outside of a running event loop.
    """
    def __init__(
        self,
        rest_pre_processors: Optional[List[RESTPreProcessorBase]] = None,
        auth: Optional[AuthBase] = None,
    ):
        self._rest_pre_processors = rest_pre_processors or []
        self._auth = auth
        self._connection: Optional[RESTConnection] = None

    async def get_rest_assistant(self) -> RESTAssistant:
        if self._connection is None:
            self._connection = RESTConnection(aiohttp_client_session=aiohttp.ClientSession())
        assistant = RESTAssistant(
            connection=self._connection,
            rest_pre_processors=self._rest_pre_processors,
            auth=self._auth,
        )
        return assistant

    async def close(self):
        if self._connection is not None:
            await self._connection.close()
            self._connection = None
