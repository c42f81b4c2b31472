from finance_tracker import config


def test_parse_env_float(monkeypatch):
    monkeypatch.setenv('FINANCE_TRACKER_TIMEOUT', '2.5')
    assert config._parse_env_float('FINANCE_TRACKER_TIMEOUT', 10.0) == 2.5
    monkeypatch.setenv('FINANCE_TRACKER_TIMEOUT', 'slow')
    assert config._parse_env_float('FINANCE_TRACKER_TIMEOUT', 10.0) == 10.0
    monkeypatch.setenv('FINANCE_TRACKER_TIMEOUT', '-1')
    assert config._parse_env_float('FINANCE_TRACKER_TIMEOUT', 10.0) == 10.0
    monkeypatch.delenv('FINANCE_TRACKER_TIMEOUT')
    assert config._parse_env_float('FINANCE_TRACKER_TIMEOUT', 10.0) == 10.0


def test_default_month(monkeypatch):
    monkeypatch.setenv('FINANCE_TRACKER_DEFAULT_MONTH', '2025-09')
    assert config.default_month() == '2025-09'
    monkeypatch.setenv('FINANCE_TRACKER_DEFAULT_MONTH', 'soon')
    assert len(config.default_month()) == 7
