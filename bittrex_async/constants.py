"""
Library-wide constants for the Bittrex client.

Centralizes protocol values and transport defaults used across modules.
"""

# API Configuration
API_VERSION = "v1.1"
BITTREX_BASE_URL = f"https://bittrex.com/api/{API_VERSION}/"

# Authentication
SIGN_HEADER_NAME = "apisign"
APIKEY_PARAM = "apikey"
NONCE_PARAM = "nonce"
RESERVED_AUTH_PARAMS = (APIKEY_PARAM, NONCE_PARAM)

# Market names are BASE-TARGET, e.g. "BTC-LTC"
MARKET_NAME_SEPARATOR = "-"

# API Endpoints (relative to BITTREX_BASE_URL)
PUBLIC_GETMARKETS_ENDPOINT = "public/getmarkets"
PUBLIC_GETCURRENCIES_ENDPOINT = "public/getcurrencies"
PUBLIC_GETTICKER_ENDPOINT = "public/getticker"
PUBLIC_GETMARKETSUMMARIES_ENDPOINT = "public/getmarketsummaries"
PUBLIC_GETMARKETSUMMARY_ENDPOINT = "public/getmarketsummary"
PUBLIC_GETORDERBOOK_ENDPOINT = "public/getorderbook"
PUBLIC_GETMARKETHISTORY_ENDPOINT = "public/getmarkethistory"

MARKET_BUYLIMIT_ENDPOINT = "market/buylimit"
MARKET_SELLLIMIT_ENDPOINT = "market/selllimit"
MARKET_CANCEL_ENDPOINT = "market/cancel"
MARKET_GETOPENORDERS_ENDPOINT = "market/getopenorders"

ACCOUNT_GETBALANCES_ENDPOINT = "account/getbalances"
ACCOUNT_GETBALANCE_ENDPOINT = "account/getbalance"
ACCOUNT_GETDEPOSITADDRESS_ENDPOINT = "account/getdepositaddress"
ACCOUNT_WITHDRAW_ENDPOINT = "account/withdraw"
ACCOUNT_GETORDER_ENDPOINT = "account/getorder"
ACCOUNT_GETORDERHISTORY_ENDPOINT = "account/getorderhistory"
ACCOUNT_GETWITHDRAWALHISTORY_ENDPOINT = "account/getwithdrawalhistory"
ACCOUNT_GETDEPOSITHISTORY_ENDPOINT = "account/getdeposithistory"

# Timeouts and Retries
DEFAULT_API_TIMEOUT = 30  # seconds
MAX_RETRY_ATTEMPTS = 3
RETRY_BASE_DELAY_SECONDS = 1.0
RETRY_MAX_BACKOFF_SECONDS = 10.0

# Logging
ERROR_BODY_EXCERPT_CHARS = 200
