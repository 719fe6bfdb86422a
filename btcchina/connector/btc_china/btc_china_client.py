import logging
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional, Sequence, Union

import ujson

from btcchina.connector.btc_china import btc_china_constants as CONSTANTS, btc_china_web_utils as web_utils
from btcchina.connector.btc_china.btc_china_auth import BTCChinaAuth
from btcchina.connector.btc_china.btc_china_utils import (
    BTCChinaConfigMap,
    construct_param_array,
    json_param,
    query_param,
    validate_scalar_params,
)
from btcchina.core.utils.tracking_nonce import NonceCreator
from btcchina.core.web_assistant.connections.data_types import RESTMethod, RESTRequest
from btcchina.data_feed.fiat_rate_data_feed import FiatRateDataFeed, FiatRateResult
from btcchina.exceptions import BTCChinaValidationError
from btcchina.logger import BTCChinaLogger

Amount = Union[Decimal, float, int, str]


class BTCChinaClient:
    """
    Client for the BTC China trade (private, JSON-RPC) and market data (public) APIs.

    Every method is a coroutine that performs one HTTP request and either returns the parsed
    response or raises a `BTCChinaError` subclass. Private methods accept optional trailing
    arguments; they are sent positionally and only up to the first one left as None.
    """
    _logger: Optional[BTCChinaLogger] = None

    @classmethod
    def logger(cls) -> BTCChinaLogger:
        if cls._logger is None:
            cls._logger = logging.getLogger(__name__)
        return cls._logger

    def __init__(self,
                 api_key: Optional[str] = None,
                 secret_key: Optional[str] = None,
                 server: Optional[str] = CONSTANTS.REST_URL,
                 timeout_ms: Optional[int] = CONSTANTS.DEFAULT_TIMEOUT_MS,
                 nonce_creator: Optional[NonceCreator] = None):
        if timeout_ms is None:
            timeout_ms = CONSTANTS.DEFAULT_TIMEOUT_MS
        if timeout_ms <= 0:
            raise BTCChinaValidationError(f"The timeout must be a positive number of milliseconds, got {timeout_ms}.")
        self._server = (server or CONSTANTS.REST_URL).rstrip("/")
        self._timeout_ms = timeout_ms
        self._auth = BTCChinaAuth(api_key=api_key, secret_key=secret_key, nonce_creator=nonce_creator)
        self._api_factory = web_utils.build_api_factory(auth=self._auth)
        self._fiat_rate_data_feed = FiatRateDataFeed(api_factory=self._api_factory, timeout_ms=self._timeout_ms)

    @classmethod
    def from_config_map(cls, config_map: BTCChinaConfigMap) -> "BTCChinaClient":
        return cls(
            api_key=config_map.api_key.get_secret_value() if config_map.api_key is not None else None,
            secret_key=config_map.secret_key.get_secret_value() if config_map.secret_key is not None else None,
            server=config_map.server,
            timeout_ms=config_map.timeout_ms,
        )

    @property
    def server(self) -> str:
        return self._server

    @property
    def timeout_ms(self) -> int:
        return self._timeout_ms

    async def __aenter__(self) -> "BTCChinaClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        await self._api_factory.close()

    async def private_request(self, method: str, params: Sequence[Any]) -> Any:
        """
        Signs and sends a JSON-RPC call to the trade API.
        No timeout is applied to private requests, only public ones honor `timeout_ms`.

        :param method: the JSON-RPC method name
        :param params: the positional params, pass an empty list when there are none

        :return: the parsed JSON response
        """
        if not self._auth.has_credentials:
            raise BTCChinaValidationError("An API key and secret must be provided to make private API requests.")
        if not isinstance(params, (list, tuple)):
            raise BTCChinaValidationError(
                f"The params {params!r} must be a list. If there are no params pass an empty list [].")
        if not method:
            raise BTCChinaValidationError("The private API method name must not be empty.")
        validate_scalar_params(params)

        params = [json_param(param) for param in params]
        tonce = self._auth.get_tonce()
        url = web_utils.private_rest_url(server=self._server)
        request_description = web_utils.private_request_description(url, tonce, method, params)

        request = RESTRequest(
            method=RESTMethod.POST,
            url=url,
            data=ujson.dumps(web_utils.build_envelope(method, params)),
            headers={"Content-Type": "application/json", CONSTANTS.TONCE_HEADER: str(tonce)},
            is_auth_required=True,
        )
        rest_assistant = await self._api_factory.get_rest_assistant()
        self.logger().network(f"Sending {request_description}")
        return await web_utils.api_request(rest_assistant, request, request_description, timeout=None)

    async def public_request(self, method: str, params: Mapping[str, Any]) -> Any:
        """
        Sends a market data request. `params` are sent as query string; None values are left out.

        :param method: the public data method, e.g. ticker
        :param params: the query parameters, pass an empty dict when there are none

        :return: the parsed JSON response
        """
        if not isinstance(params, Mapping):
            raise BTCChinaValidationError(
                f"The params {params!r} must be a mapping. If there are no params pass an empty dict {{}}.")

        validate_scalar_params(value for value in params.values() if value is not None)
        query = {key: query_param(value) for key, value in params.items() if value is not None}
        url = web_utils.public_rest_url(method, server=self._server)
        request_description = web_utils.public_request_description(url, query)

        request = RESTRequest(method=RESTMethod.GET, url=url, params=query)
        rest_assistant = await self._api_factory.get_rest_assistant()
        self.logger().network(f"Sending {request_description}")
        return await web_utils.api_request(rest_assistant, request, request_description,
                                           timeout=self._timeout_ms / 1e3)

    # Public market data

    async def get_ticker(self, market: Optional[str] = None) -> Dict[str, Any]:
        return await self.public_request(CONSTANTS.TICKER_METHOD, {"market": market})

    async def get_order_book(self, market: Optional[str] = None, limit: Optional[int] = None) -> Dict[str, Any]:
        params: Dict[str, Any] = {"market": market}
        if limit:
            params["limit"] = limit
        return await self.public_request(CONSTANTS.ORDER_BOOK_METHOD, params)

    async def get_history_data(self, params: Mapping[str, Any]) -> Any:
        return await self.public_request(CONSTANTS.HISTORY_DATA_METHOD, params)

    async def get_trades(self, market: Optional[str] = None, params: Optional[Mapping[str, Any]] = None) -> Any:
        trade_params = {"market": market, "sincetype": "time"}
        trade_params.update(params or {})
        return await self.public_request(CONSTANTS.HISTORY_DATA_METHOD, trade_params)

    # Private trading and account

    async def buy_order2(self,
                         price: Optional[Amount] = None,
                         amount: Optional[Amount] = None,
                         market: Optional[str] = None) -> Dict[str, Any]:
        params = construct_param_array((CONSTANTS.BUY_ORDER_METHOD, price, amount, market), 3)
        return await self.private_request(CONSTANTS.BUY_ORDER_METHOD, params)

    async def sell_order2(self,
                          price: Optional[Amount] = None,
                          amount: Optional[Amount] = None,
                          market: Optional[str] = None) -> Dict[str, Any]:
        params = construct_param_array((CONSTANTS.SELL_ORDER_METHOD, price, amount, market), 3)
        return await self.private_request(CONSTANTS.SELL_ORDER_METHOD, params)

    async def create_order2(self,
                            order_type: str,
                            price: Optional[Amount] = None,
                            amount: Optional[Amount] = None,
                            market: Optional[str] = None) -> Dict[str, Any]:
        """
        Places a buy or a sell order depending on `order_type`
        """
        if order_type == CONSTANTS.SIDE_BUY:
            return await self.buy_order2(price, amount, market)
        elif order_type == CONSTANTS.SIDE_SELL:
            return await self.sell_order2(price, amount, market)
        raise BTCChinaValidationError(f'The order type "{order_type}" needs to be either "buy" or "sell".')

    async def cancel_order(self, order_id: Optional[int] = None, market: Optional[str] = None) -> Dict[str, Any]:
        params = construct_param_array((CONSTANTS.CANCEL_ORDER_METHOD, order_id, market), 2)
        return await self.private_request(CONSTANTS.CANCEL_ORDER_METHOD, params)

    async def get_orders(self,
                         open_only: Optional[bool] = None,
                         market: Optional[str] = None,
                         limit: Optional[int] = None,
                         offset: Optional[int] = None,
                         since: Optional[int] = None,
                         with_detail: Optional[bool] = None) -> Dict[str, Any]:
        params = construct_param_array(
            (CONSTANTS.GET_ORDERS_METHOD, open_only, market, limit, offset, since, with_detail), 6)
        return await self.private_request(CONSTANTS.GET_ORDERS_METHOD, params)

    async def get_order(self,
                        order_id: Optional[int] = None,
                        market: Optional[str] = None,
                        with_detail: Optional[bool] = None) -> Dict[str, Any]:
        params = construct_param_array((CONSTANTS.GET_ORDER_METHOD, order_id, market, with_detail), 3)
        return await self.private_request(CONSTANTS.GET_ORDER_METHOD, params)

    async def get_transactions(self,
                               transaction_type: Optional[str] = None,
                               limit: Optional[int] = None,
                               offset: Optional[int] = None,
                               since: Optional[int] = None,
                               since_type: Optional[str] = None) -> Dict[str, Any]:
        params = construct_param_array(
            (CONSTANTS.GET_TRANSACTIONS_METHOD, transaction_type, limit, offset, since, since_type), 5)
        return await self.private_request(CONSTANTS.GET_TRANSACTIONS_METHOD, params)

    async def get_market_depth2(self, limit: Optional[int] = None, market: Optional[str] = None) -> Dict[str, Any]:
        params = construct_param_array((CONSTANTS.GET_MARKET_DEPTH_METHOD, limit, market), 2)
        return await self.private_request(CONSTANTS.GET_MARKET_DEPTH_METHOD, params)

    async def get_deposits(self, currency: Optional[str] = None, pending_only: Optional[bool] = None) -> Dict[str, Any]:
        params = construct_param_array((CONSTANTS.GET_DEPOSITS_METHOD, currency, pending_only), 2)
        return await self.private_request(CONSTANTS.GET_DEPOSITS_METHOD, params)

    async def get_withdrawal(self, withdrawal_id: Optional[int] = None, currency: Optional[str] = None) -> Dict[str, Any]:
        params = construct_param_array((CONSTANTS.GET_WITHDRAWAL_METHOD, withdrawal_id, currency), 2)
        return await self.private_request(CONSTANTS.GET_WITHDRAWAL_METHOD, params)

    async def get_withdrawals(self,
                              currency: Optional[str] = None,
                              pending_only: Optional[bool] = None) -> Dict[str, Any]:
        params = construct_param_array((CONSTANTS.GET_WITHDRAWALS_METHOD, currency, pending_only), 2)
        return await self.private_request(CONSTANTS.GET_WITHDRAWALS_METHOD, params)

    async def request_withdrawal(self,
                                 currency: Optional[str] = None,
                                 amount: Optional[Amount] = None) -> Dict[str, Any]:
        params = construct_param_array((CONSTANTS.REQUEST_WITHDRAWAL_METHOD, currency, amount), 2)
        return await self.private_request(CONSTANTS.REQUEST_WITHDRAWAL_METHOD, params)

    async def get_account_info(self, info_type: Optional[str] = None) -> Dict[str, Any]:
        params = construct_param_array((CONSTANTS.GET_ACCOUNT_INFO_METHOD, info_type), 1)
        return await self.private_request(CONSTANTS.GET_ACCOUNT_INFO_METHOD, params)

    # Fiat rates

    async def get_fiat_exchange_rates(self) -> FiatRateResult:
        """
        Scrapes the fiat deposit and withdrawal rates against CNY from the BTCC website.
        The result holds every rate that could be parsed and the failures of the others.
        """
        return await self._fiat_rate_data_feed.fetch_rates()
