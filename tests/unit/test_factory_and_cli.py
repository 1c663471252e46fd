"""
Tests for trading API selection and the CLI commands.
"""
from decimal import Decimal
from unittest.mock import patch

from typer.testing import CliRunner

from bittrex_async.cli import app
from bittrex_async.config.config import Config, ExchangeConfig, RetryConfig
from bittrex_async.data.bittrex_client import BittrexClient
from bittrex_async.factory import create_trading_api
from bittrex_async.paper.order_simulation import OrderSimulation

runner = CliRunner()


class TestCreateTradingApi:

    def test_live_mode_returns_client(self):
        config = Config(mode="live", exchange=ExchangeConfig(api_key="k", api_secret="s"))

        api = create_trading_api(config)

        assert isinstance(api, BittrexClient)
        assert api.has_valid_credentials()

    def test_simulation_mode_wraps_client(self):
        config = Config(mode="simulation")

        api = create_trading_api(config)

        assert isinstance(api, OrderSimulation)
        assert isinstance(api.client, BittrexClient)

    def test_explicit_client_is_used(self):
        client = BittrexClient()

        api = create_trading_api(Config(mode="simulation"), client=client)

        assert api.client is client

    def test_client_settings_come_from_config(self):
        config = Config(mode="live", exchange=ExchangeConfig(base_url="https://example.test/v1.1", request_timeout_seconds=5))

        api = create_trading_api(config)

        assert api.base_url == "https://example.test/v1.1/"
        assert api.request_timeout == 5

    def test_key_without_secret_builds_public_client(self):
        exchange = ExchangeConfig(api_key="k")
        assert not exchange.has_credentials()

        client = BittrexClient.from_config(Config(exchange=exchange))

        assert not client.has_valid_credentials()

    def test_retry_policy_comes_from_config(self):
        config = Config(retry=RetryConfig(max_retries=5, base_delay=0.25, max_backoff=4.0))

        client = BittrexClient.from_config(config)

        assert client.max_retries == 5


class TestCli:

    def _invoke(self, args, sim=None):
        with patch("bittrex_async.cli.setup_logging"):
            if sim is None:
                return runner.invoke(app, args)
            with patch("bittrex_async.cli.create_trading_api", return_value=sim):
                return runner.invoke(app, args)

    def test_simulated_balances_start_empty(self):
        result = self._invoke(["balances", "--simulate"])

        assert result.exit_code == 0, result.output
        assert "No balances" in result.output

    def test_simulated_buy_reports_uuid(self, quote_client):
        sim = OrderSimulation(quote_client(Decimal("10")))

        result = self._invoke(["buy", "BTC-LTC", "1", "12", "--simulate"], sim=sim)

        assert result.exit_code == 0, result.output
        assert "Buy order accepted:" in result.output
        assert sim._ledger.balance("LTC").balance == Decimal("1")

    def test_cancel_unknown_order_exits_nonzero(self, quote_client):
        sim = OrderSimulation(quote_client(Decimal("10")))

        result = self._invoke(["cancel", "nope", "--simulate"], sim=sim)

        assert result.exit_code == 1

    def test_invalid_quantity_is_usage_error(self):
        result = self._invoke(["sell", "BTC-LTC", "lots", "12", "--simulate"])

        assert result.exit_code == 2

    def test_ticker_output(self, quote_client):
        sim = OrderSimulation(quote_client(Decimal("0.5")))

        result = self._invoke(["ticker", "BTC-LTC"], sim=sim)

        assert result.exit_code == 0, result.output
        assert "last=0.5" in result.output

    def test_missing_config_file_exits(self, tmp_path):
        result = self._invoke(["balances", "--config", str(tmp_path / "missing.yaml")])

        assert result.exit_code == 1
