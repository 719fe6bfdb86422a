import asyncio
import errno
import json
import unittest
from typing import Any, List, Optional, Tuple

import aiohttp

from btcchina.connector.btc_china import btc_china_constants as CONSTANTS, btc_china_web_utils as web_utils
from btcchina.exceptions import (
    BTCChinaAPIError,
    BTCChinaError,
    BTCChinaHTTPStatusError,
    BTCChinaParseError,
    BTCChinaTransportError,
    BTCChinaValidationError,
    ErrorKind,
)


class BTCChinaWebUtilsTests(unittest.TestCase):

    def setUp(self) -> None:
        super().setUp()
        self.request_description = web_utils.private_request_description(
            url="https://api.btcchina.com/api_trade_v1.php", tonce=1000000, method="getAccountInfo", params=[])

    def test_public_rest_url(self):
        self.assertEqual("https://api.btcchina.com/data/ticker", web_utils.public_rest_url("ticker"))
        self.assertEqual("https://api.example.com/data/orderbook",
                         web_utils.public_rest_url("orderbook", server="https://api.example.com"))

    def test_public_rest_url_for_trades_uses_data_mirror(self):
        self.assertEqual("https://data.btcchina.com/data/trades",
                         web_utils.public_rest_url("trades", server="https://api.example.com"))

    def test_private_rest_url(self):
        self.assertEqual("https://api.btcchina.com/api_trade_v1.php", web_utils.private_rest_url())

    def test_request_descriptions(self):
        self.assertEqual(
            'POST request to url https://api.btcchina.com/api_trade_v1.php with tonce 1000000, '
            'method getAccountInfo and params []',
            self.request_description)
        self.assertIn("GET request to url https://api.btcchina.com/data/ticker with parameters",
                      web_utils.public_request_description("https://api.btcchina.com/data/ticker", {"market": "all"}))

    def test_build_envelope(self):
        self.assertEqual({"method": "cancelOrder", "params": [1, "BTCCNY"], "id": 1},
                         web_utils.build_envelope("cancelOrder", (1, "BTCCNY")))

    def test_transport_error_code(self):
        self.assertEqual("ETIMEDOUT", web_utils.transport_error_code(asyncio.TimeoutError()))
        self.assertEqual("ECONNREFUSED",
                         web_utils.transport_error_code(ConnectionRefusedError(errno.ECONNREFUSED, "refused")))
        self.assertEqual("ServerDisconnectedError",
                         web_utils.transport_error_code(aiohttp.ServerDisconnectedError()))

    def test_success_with_json_object(self):
        data = web_utils.normalize_response(self.request_description, status=200, body='{"result": {"a": 1}, "id": "1"}')

        self.assertEqual({"result": {"a": 1}, "id": "1"}, data)

    def test_success_with_json_array(self):
        data = web_utils.normalize_response(self.request_description, status=200, body='[{"tid": "1"}]')

        self.assertEqual([{"tid": "1"}], data)

    def test_success_with_status_at_upper_bound(self):
        data = web_utils.normalize_response(self.request_description, status=299, body="{}")

        self.assertEqual({}, data)

    def test_transport_failure_takes_priority_over_status(self):
        with self.assertRaises(BTCChinaTransportError) as context:
            web_utils.normalize_response(
                self.request_description,
                status=200,
                body='{"result": true}',
                transport_error=asyncio.TimeoutError())

        error = context.exception
        self.assertEqual(ErrorKind.TRANSPORT, error.kind)
        self.assertEqual("ETIMEDOUT", error.code)
        self.assertIsInstance(error.__cause__, asyncio.TimeoutError)
        self.assertIn(self.request_description, str(error))

    def test_non_2xx_status(self):
        for status in (199, 300, 404):
            with self.assertRaises(BTCChinaHTTPStatusError) as context:
                web_utils.normalize_response(self.request_description, status=status, status_message="Nope", body="{}")
            self.assertEqual(status, context.exception.status_code)
            self.assertEqual(ErrorKind.HTTP_STATUS, context.exception.kind)
            self.assertIn("Status message: Nope", str(context.exception))

    def test_http_500_with_error_body_is_http_status_error(self):
        body = json.dumps({"error": {"code": -32000, "message": "Internal error"}, "id": "1"})

        with self.assertRaises(BTCChinaHTTPStatusError) as context:
            web_utils.normalize_response(self.request_description, status=500, body=body)

        self.assertEqual(500, context.exception.status_code)
        self.assertIn(self.request_description, str(context.exception))

    def test_unparsable_body(self):
        with self.assertRaises(BTCChinaParseError) as context:
            web_utils.normalize_response(self.request_description, status=200, body="<html>maintenance</html>")

        self.assertEqual(ErrorKind.PARSE, context.exception.kind)
        self.assertEqual("<html>maintenance</html>", context.exception.body)
        self.assertIn("<html>maintenance</html>", str(context.exception))

    def test_scalar_json_body_is_parse_error(self):
        for body in ("123", '"text"', "null", "true", ""):
            with self.assertRaises(BTCChinaParseError):
                web_utils.normalize_response(self.request_description, status=200, body=body)

    def test_parse_error_truncates_long_body(self):
        body = "x" * 1000

        with self.assertRaises(BTCChinaParseError) as context:
            web_utils.normalize_response(self.request_description, status=200, body=body)

        self.assertIn("(truncated)", str(context.exception))
        self.assertNotIn("x" * (CONSTANTS.RESPONSE_SNIPPET_LENGTH + 1), str(context.exception))

    def test_api_error_field(self):
        body = json.dumps({"error": {"code": -32003, "message": "Insufficient CNY balance"}, "id": "1"})

        with self.assertRaises(BTCChinaAPIError) as context:
            web_utils.normalize_response(self.request_description, status=200, body=body)

        error = context.exception
        self.assertEqual(ErrorKind.API_ERROR, error.kind)
        self.assertEqual(-32003, error.code)
        self.assertEqual("Insufficient CNY balance", error.api_message)
        self.assertIn("getAccountInfo", str(error))
        self.assertIn("1000000", str(error))

    def test_api_error_field_without_structure(self):
        with self.assertRaises(BTCChinaAPIError) as context:
            web_utils.normalize_response(self.request_description, status=200, body={"error": "Unauthorized"})

        self.assertIsNone(context.exception.code)
        self.assertEqual("Unauthorized", context.exception.api_message)

    def test_already_parsed_body(self):
        self.assertEqual({"ticker": {}}, web_utils.normalize_response(self.request_description, status=200,
                                                                      body={"ticker": {}}))

    def test_every_failure_carries_request_description(self):
        outcomes = [
            dict(transport_error=aiohttp.ClientConnectionError()),
            dict(status=503, body=""),
            dict(status=200, body="not json"),
            dict(status=200, body='{"error": {"code": 1, "message": "m"}}'),
        ]
        for outcome in outcomes:
            with self.assertRaises(BTCChinaError) as context:
                web_utils.normalize_response(self.request_description, **outcome)
            self.assertEqual(self.request_description, context.exception.request_description)


class DeliverToHandlerTests(unittest.IsolatedAsyncioTestCase):

    def setUp(self) -> None:
        super().setUp()
        self.calls: List[Tuple[Optional[BTCChinaError], Any]] = []

    def handler(self, error, data):
        self.calls.append((error, data))

    async def test_success_calls_handler_once_with_data(self):
        async def succeed():
            return {"result": True}

        await web_utils.deliver_to_handler(self.handler, succeed())

        self.assertEqual([(None, {"result": True})], self.calls)

    async def test_failure_calls_handler_once_with_error(self):
        error = BTCChinaValidationError("bad input")

        async def fail():
            raise error

        await web_utils.deliver_to_handler(self.handler, fail())

        self.assertEqual([(error, None)], self.calls)

    async def test_non_callable_handler_is_rejected_before_the_call(self):
        started = []

        async def call():
            started.append(True)

        with self.assertRaises(BTCChinaValidationError):
            web_utils.deliver_to_handler("not a function", call())

        self.assertEqual([], started)

    async def test_unexpected_exception_calls_handler_once_with_error(self):
        error = TypeError("unsupported operand")

        async def fail():
            raise error

        await web_utils.deliver_to_handler(self.handler, fail())

        self.assertEqual([(error, None)], self.calls)

    async def test_cancellation_is_not_delivered(self):
        async def cancelled():
            raise asyncio.CancelledError()

        with self.assertRaises(asyncio.CancelledError):
            await web_utils.deliver_to_handler(self.handler, cancelled())

        self.assertEqual([], self.calls)
