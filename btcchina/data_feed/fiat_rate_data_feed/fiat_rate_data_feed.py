import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional

from bs4 import BeautifulSoup, Tag

from btcchina.connector.btc_china import btc_china_web_utils as web_utils
from btcchina.core.web_assistant.connections.data_types import RESTMethod, RESTRequest
from btcchina.core.web_assistant.web_assistants_factory import WebAssistantsFactory
from btcchina.data_feed.fiat_rate_data_feed import fiat_rate_constants as CONSTANTS
from btcchina.exceptions import BTCChinaParseError
from btcchina.logger import BTCChinaLogger


@dataclass
class FiatRate:
    deposit: Decimal
    withdrawal: Decimal


@dataclass
class FiatRateResult:
    """
    Rates keyed by pair symbol (e.g. USDCNY) for every currency that could be parsed,
    plus the failures of the ones that could not, in the order they were met.
    """
    rates: Dict[str, FiatRate] = field(default_factory=dict)
    errors: List[BTCChinaParseError] = field(default_factory=list)

    @property
    def last_error(self) -> Optional[BTCChinaParseError]:
        return self.errors[-1] if len(self.errors) > 0 else None


class FiatRateDataFeed:
    """
    Screen scrapes the fiat deposit and withdrawal exchange rates from the BTCC international voucher page.
    The rates are not available through the API.
    """
    _logger: Optional[BTCChinaLogger] = None

    @classmethod
    def logger(cls) -> BTCChinaLogger:
        if cls._logger is None:
            cls._logger = logging.getLogger(__name__)
        return cls._logger

    def __init__(self,
                 api_factory: Optional[WebAssistantsFactory] = None,
                 timeout_ms: int = CONSTANTS.DEFAULT_TIMEOUT_MS):
        self._api_factory = api_factory or WebAssistantsFactory()
        self._timeout_ms = timeout_ms

    @property
    def name(self) -> str:
        return "btc_china_fiat_rates"

    async def fetch_rates(self) -> FiatRateResult:
        html = await self.fetch_page()
        return self.parse_rates(html)

    async def fetch_page(self) -> str:
        request = RESTRequest(method=RESTMethod.GET, url=CONSTANTS.FIAT_RATES_URL)
        request_description = f"{request.method} request to url {request.url}"

        rest_assistant = await self._api_factory.get_rest_assistant()
        try:
            response = await rest_assistant.call(request=request, timeout=self._timeout_ms / 1e3)
            html = await response.text()
        except web_utils.TRANSPORT_ERRORS as e:
            web_utils.raise_for_transport_and_status(request_description, transport_error=e)

        web_utils.raise_for_transport_and_status(
            request_description,
            status=response.status,
            status_message=response.reason)
        if not html:
            raise BTCChinaParseError(f"No HTML response from {request_description}",
                                     body=html,
                                     request_description=request_description)
        return html

    @classmethod
    def parse_rates(cls, html: str) -> FiatRateResult:
        """
        Extracts the rates of every base currency quoted in CNY.
        A currency that can not be parsed is recorded in `errors` and does not stop the others.
        """
        rows = BeautifulSoup(html, "html.parser").select("table tr")
        result = FiatRateResult()

        for base_currency in CONSTANTS.BASE_CURRENCIES:
            try:
                rate = cls.parse_rate(rows, base_currency, CONSTANTS.QUOTE_CURRENCY)
            except BTCChinaParseError as e:
                cls.logger().debug(str(e))
                result.errors.append(e)
            else:
                result.rates[f"{base_currency}{CONSTANTS.QUOTE_CURRENCY}"] = rate

        return result

    @staticmethod
    def parse_rate(rows: List[Tag], base_currency: str, quote_currency: str) -> FiatRate:
        symbol = f"{base_currency}/{quote_currency}"

        rate_row = next((row for row in rows if symbol in row.get_text()), None)
        if rate_row is None:
            raise BTCChinaParseError(f"Could not find exchange rate for symbol {symbol}")

        cells = rate_row.find_all(["td", "th"], recursive=False)
        if len(cells) <= CONSTANTS.WITHDRAWAL_CELL_INDEX:
            raise BTCChinaParseError(f"Exchange rate row for symbol {symbol} has {len(cells)} cells, expected 3",
                                     body=str(rate_row))

        deposit_text = cells[CONSTANTS.DEPOSIT_CELL_INDEX].get_text(strip=True)
        withdrawal_text = cells[CONSTANTS.WITHDRAWAL_CELL_INDEX].get_text(strip=True)
        try:
            deposit, withdrawal = Decimal(deposit_text), Decimal(withdrawal_text)
        except InvalidOperation:
            deposit = withdrawal = None
        if deposit is None or not deposit.is_finite() or not withdrawal.is_finite():
            raise BTCChinaParseError(
                f"Could not parse exchange rates {deposit_text!r} and {withdrawal_text!r} for symbol {symbol}",
                body=str(rate_row))

        return FiatRate(deposit=deposit, withdrawal=withdrawal)
