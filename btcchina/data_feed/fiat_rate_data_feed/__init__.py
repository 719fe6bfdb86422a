from btcchina.data_feed.fiat_rate_data_feed.fiat_rate_data_feed import FiatRate, FiatRateDataFeed, FiatRateResult

__all__ = [
    "FiatRate",
    "FiatRateDataFeed",
    "FiatRateResult",
]
