import pytest

from gemini_proxy.config import get_settings

_ENV_VARS = (
    "GEMINI_API_KEY",
    "GENERATIVE_API_KEY",
    "USE_SECRET_MANAGER",
    "GEMINI_PROXY_ALLOWED_ORIGIN",
    "GEMINI_PROXY_GEMINI_MODEL",
    "GEMINI_PROXY_REQUEST_TIMEOUT_SECONDS",
    "GEMINI_PROXY_GCP_PROJECT_ID",
    "GEMINI_PROXY_SECRET_API_KEY_NAME",
    "GCP_PROJECT",
    "GOOGLE_CLOUD_PROJECT",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep the developer's shell configuration out of every test."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
