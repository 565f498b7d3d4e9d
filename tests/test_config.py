import pytest

from metronomeops.core.config import DEFAULT_REQUEST_TIMEOUT, DEFAULT_URL, Config


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("METRONOME_URL", "METRONOME_DEBUG", "METRONOME_REQUEST_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = Config()

    assert config.url == DEFAULT_URL == "http://127.0.0.1:9000"
    assert config.debug is False
    assert config.request_timeout == DEFAULT_REQUEST_TIMEOUT == 5


@pytest.mark.parametrize(
    "url, expected",
    [
        ("http://metronome:9000/", "http://metronome:9000"),
        ("http://metronome:9000/?foo=bar", "http://metronome:9000"),
        ("", DEFAULT_URL),
    ],
)
def test_url_is_sanitized(url, expected):
    assert Config(url=url).url == expected


def test_from_env_reads_environment(monkeypatch):
    monkeypatch.setenv("METRONOME_URL", "http://metronome.prod:9000/")
    monkeypatch.setenv("METRONOME_DEBUG", "true")
    monkeypatch.setenv("METRONOME_REQUEST_TIMEOUT", "12")

    config = Config.from_env()

    assert config == Config(url="http://metronome.prod:9000", debug=True, request_timeout=12)


def test_from_env_explicit_arguments_win(monkeypatch):
    monkeypatch.setenv("METRONOME_URL", "http://from-env:9000")
    monkeypatch.setenv("METRONOME_DEBUG", "1")

    config = Config.from_env(url="http://explicit:9000", debug=False, request_timeout=2)

    assert config.url == "http://explicit:9000"
    assert config.debug is False
    assert config.request_timeout == 2


@pytest.mark.parametrize("raw", ["soon", "0", "-3"])
def test_from_env_ignores_bad_timeout(monkeypatch, raw):
    monkeypatch.setenv("METRONOME_REQUEST_TIMEOUT", raw)

    assert Config.from_env().request_timeout == DEFAULT_REQUEST_TIMEOUT
