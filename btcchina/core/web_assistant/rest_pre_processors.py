import abc

from btcchina.core.web_assistant.connections.data_types import RESTRequest


class RESTPreProcessorBase(abc.ABC):
    """An interface class that enables functionality injection into the `RESTAssistant`.

    The logic provided by a class implementing this interface is applied to a request
    before it is sent out to the server.
    """

    @abc.abstractmethod
    async def pre_process(self, request: RESTRequest) -> RESTRequest:
        ...


class UserAgentRESTPreProcessor(RESTPreProcessorBase):
    def __init__(self, user_agent: str):
        super().__init__()
        self._user_agent = user_agent

    async def pre_process(self, request: RESTRequest) -> RESTRequest:
        headers = dict(request.headers or {})
        headers["User-Agent"] = self._user_agent
        request.headers = headers
        return request
