from abc import ABC, abstractmethod

from btcchina.core.web_assistant.connections.data_types import RESTRequest


class AuthBase(ABC):
    @abstractmethod
    async def rest_authenticate(self, request: RESTRequest) -> RESTRequest:
        ...
