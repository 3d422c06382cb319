import pytest
import yaml

from memecoin.conf import ConfigError, load_config


def _settings():
    return {
        "server": {"name": "meme-coin", "port": "8080", "version": "1.0.0"},
        "log": {"level": "debug"},
        "mysql": {
            "host": "localhost",
            "port": 3306,
            "username": "user",
            "password": "password",
            "database": "hr",
            "maxIdle": 10,
            "maxOpen": 20,
        },
    }


def _write(tmp_path, data):
    (tmp_path / "config.yaml").write_text(yaml.safe_dump(data), encoding="utf-8")
    return tmp_path


def test_loads_all_sections(tmp_path):
    config = load_config(_write(tmp_path, _settings()), environ={})
    assert config.server.name == "meme-coin"
    assert config.server.port == "8080"
    assert config.log.level == "debug"
    assert config.mysql.port == 3306
    assert config.mysql.password == "password"
    assert (config.mysql.max_idle, config.mysql.max_open) == (10, 20)


def test_numeric_server_port_becomes_text(tmp_path):
    data = _settings()
    data["server"]["port"] = 8080
    config = load_config(_write(tmp_path, data), environ={})
    assert config.server.port == "8080"


def test_environment_overrides_file(tmp_path):
    environ = {"MYSQL_HOST": "db.example.com", "MYSQL_MAXOPEN": "50", "SERVER_NAME": "other"}
    config = load_config(_write(tmp_path, _settings()), environ=environ)
    assert config.mysql.host == "db.example.com"
    assert config.mysql.max_open == 50
    assert config.server.name == "other"


def test_environment_fills_missing_field(tmp_path):
    data = _settings()
    del data["log"]
    config = load_config(_write(tmp_path, data), environ={"LOG_LEVEL": "info"})
    assert config.log.level == "info"


def test_missing_file_is_a_read_error(tmp_path):
    with pytest.raises(ConfigError, match="read config error"):
        load_config(tmp_path, environ={})


def test_zero_required_int_fails_validation(tmp_path):
    data = _settings()
    data["mysql"]["maxIdle"] = 0
    with pytest.raises(ConfigError, match="validate error"):
        load_config(_write(tmp_path, data), environ={})


def test_missing_section_fails_validation(tmp_path):
    data = _settings()
    del data["server"]
    with pytest.raises(ConfigError, match="server.name"):
        load_config(_write(tmp_path, data), environ={})


def test_non_numeric_port_is_a_marshal_error(tmp_path):
    data = _settings()
    data["mysql"]["port"] = "abc"
    with pytest.raises(ConfigError, match="marshal error"):
        load_config(_write(tmp_path, data), environ={})