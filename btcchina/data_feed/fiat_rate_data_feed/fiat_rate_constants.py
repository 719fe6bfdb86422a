FIAT_RATES_URL = "https://exchange.btcc.com/page/internationalvoucher"

QUOTE_CURRENCY = "CNY"
BASE_CURRENCIES = ["USD", "CNH", "HKD", "EUR"]

# deposit and withdrawal rates are the second and third cells of a rate row
DEPOSIT_CELL_INDEX = 1
WITHDRAWAL_CELL_INDEX = 2

DEFAULT_TIMEOUT_MS = 30000
