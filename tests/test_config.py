from kvserve.config import (
    MaintenanceConfig,
    NetworkConfig,
    PerformanceConfig,
    ServerConfig,
    load_server_config,
)


def test_defaults_when_environment_is_empty():
    config = load_server_config({})
    assert config.network.host == "localhost"
    assert config.network.port == 6379
    assert config.performance.max_connections == 1000
    assert config.maintenance.expiration_check_interval == 1.0


def test_defaults_match_dataclass_defaults():
    assert load_server_config({}) == ServerConfig()


def test_environment_overrides_every_setting():
    config = load_server_config(
        {
            "REDIS_HOST": "0.0.0.0",
            "REDIS_PORT": "7000",
            "REDIS_MAX_CONNECTIONS": "5",
            "REDIS_EXPIRATION_CHECK_INTERVAL": "3",
        }
    )
    assert config == ServerConfig(
        network=NetworkConfig("0.0.0.0", 7000),
        performance=PerformanceConfig(5),
        maintenance=MaintenanceConfig(3.0),
    )


def test_unparsable_integer_falls_back_to_default():
    config = load_server_config({"REDIS_PORT": "abc", "REDIS_MAX_CONNECTIONS": "1.5"})
    assert config.network.port == 6379
    assert config.performance.max_connections == 1000


def test_empty_values_fall_back_to_defaults():
    config = load_server_config({"REDIS_HOST": "", "REDIS_PORT": ""})
    assert config.network == NetworkConfig()


def test_signed_integers_are_accepted():
    config = load_server_config({"REDIS_PORT": "+7001", "REDIS_MAX_CONNECTIONS": "-2"})
    assert config.network.port == 7001
    assert config.performance.max_connections == -2


def test_reads_process_environment_by_default(monkeypatch):
    monkeypatch.setenv("REDIS_HOST", "127.0.0.1")
    monkeypatch.setenv("REDIS_PORT", "7002")
    config = load_server_config()
    assert config.network == NetworkConfig("127.0.0.1", 7002)