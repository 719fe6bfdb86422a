from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

import aiohttp


class RESTMethod(Enum):
    GET = "GET"
    POST = "POST"

    def __str__(self):
        obj_str = repr(self)
        return obj_str

    def __repr__(self):
        return self.value


@dataclass
class RESTRequest:
    method: RESTMethod
    url: str
    params: Optional[Mapping[str, Any]] = None
    data: Any = None
    headers: Optional[Mapping[str, str]] = None
    is_auth_required: bool = False


class RESTResponse:
    def __init__(self, aiohttp_response: aiohttp.ClientResponse):
        self._aiohttp_response = aiohttp_response

    @property
    def status(self) -> int:
        status_ = int(self._aiohttp_response.status)
        return status_

    @property
    def reason(self) -> Optional[str]:
        return self._aiohttp_response.reason

    async def text(self) -> str:
        # undecodable bytes are kept as replacement characters so the body still reaches the parser
        text_ = await self._aiohttp_response.text(errors="replace")
        return text_
