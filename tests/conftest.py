import pytest

from onsitecalc.config import reset_settings

_ENV_VARS = (
    "ONSITECALC_CONFIG_FILE",
    "ONSITECALC_MAX_EXPRESSION_LENGTH",
    "ONSITECALC_LOG_PATH",
    "ONSITECALC_LOG_LEVEL",
    "ONSITECALC_INTERPRETER_ENDPOINT",
    "ONSITECALC_INTERPRETER_MODEL",
    "ONSITECALC_INTERPRETER_TIMEOUT",
    "ONSITECALC_INTERPRETER_MAX_RETRIES",
)


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()
