# A single source of truth for constant variables related to the exchange
EXCHANGE_NAME = "btc_china"

# Base URLs
REST_URL = "https://api.btcchina.com"
# Only the trades data is served from the data mirror. Ticker and order book are documented there too
# but have to be requested from the main api host.
DATA_MIRROR_URL = "https://data.btcchina.com"

PRIVATE_PATH_URL = "/api_trade_v1.php"
PUBLIC_PATH_URL = "/data/{method}"

USER_AGENT = "BTC China Python API Client"

JSON_RPC_ID = 1
REQUEST_METHOD_TOKEN = "post"

# Request timeout in milliseconds, applied to public requests only
DEFAULT_TIMEOUT_MS = 30000

# Public methods
TICKER_METHOD = "ticker"
ORDER_BOOK_METHOD = "orderbook"
HISTORY_DATA_METHOD = "historydata"
TRADES_METHOD = "trades"

# Private methods
BUY_ORDER_METHOD = "buyOrder2"
SELL_ORDER_METHOD = "sellOrder2"
CANCEL_ORDER_METHOD = "cancelOrder"
GET_ORDERS_METHOD = "getOrders"
GET_ORDER_METHOD = "getOrder"
GET_TRANSACTIONS_METHOD = "getTransactions"
GET_MARKET_DEPTH_METHOD = "getMarketDepth2"
GET_DEPOSITS_METHOD = "getDeposits"
GET_WITHDRAWAL_METHOD = "getWithdrawal"
GET_WITHDRAWALS_METHOD = "getWithdrawals"
REQUEST_WITHDRAWAL_METHOD = "requestWithdrawal"
GET_ACCOUNT_INFO_METHOD = "getAccountInfo"

# Headers
AUTHORIZATION_HEADER = "Authorization"
TONCE_HEADER = "Json-Rpc-Tonce"

# Order sides accepted by create_order2
SIDE_BUY = "buy"
SIDE_SELL = "sell"

# Length of the body excerpt kept in parse errors
RESPONSE_SNIPPET_LENGTH = 200
