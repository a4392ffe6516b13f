from eth_cursor.config import CursorConfig, EthereumTable, load_config


def test_load_config_from_env(monkeypatch):
    monkeypatch.setenv("ETH_CURSOR_RPC_URL", "http://localhost:8545")
    monkeypatch.setenv("ETH_CURSOR_TIMEZONE", "Europe/Berlin")
    monkeypatch.setenv("ETH_CURSOR_REQUEST_TIMEOUT", "5")
    monkeypatch.setenv("ETH_CURSOR_LAZY_LOGS", "false")
    monkeypatch.setenv("LOGLEVEL", "debug")

    config = load_config()

    assert config.rpc_url == "http://localhost:8545"
    assert config.timezone().zone == "Europe/Berlin"
    assert config.request_timeout_seconds == 5.0
    assert config.lazy_logs is False
    assert config.log_level == "DEBUG"


def test_timezone_falls_back_to_tz(monkeypatch):
    monkeypatch.delenv("ETH_CURSOR_TIMEZONE", raising=False)
    monkeypatch.setenv("TZ", "America/New_York")

    assert CursorConfig().default_timezone == "America/New_York"


def test_table_values():
    assert EthereumTable("erc20") == EthereumTable.ERC20
