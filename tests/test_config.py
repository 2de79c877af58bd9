"""ClientConfig: endpoint resolution, headers and environment loading."""
import pytest

from moondream.config import AuthMode, ClientConfig
from moondream.constants import DEFAULT_TIMEOUT_SECONDS, HOSTED_ENDPOINT
from moondream.errors import ValidationError


@pytest.fixture
def clean_env(monkeypatch):
    monkeypatch.setattr("moondream.config.load_dotenv", lambda **_: None)
    for key in ("MOONDREAM_ENDPOINT", "MOONDREAM_API_KEY", "MOONDREAM_TIMEOUT"):
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


def test_remote_uses_hosted_endpoint():
    config = ClientConfig.remote("tok")

    assert config.endpoint == HOSTED_ENDPOINT
    assert config.auth_mode is AuthMode.REMOTE
    assert config.token == "tok"
    assert config.timeout == DEFAULT_TIMEOUT_SECONDS


def test_remote_endpoint_can_be_overridden():
    config = ClientConfig.remote("tok", endpoint="https://proxy.example.com/v1")

    assert config.url_for("/query") == "https://proxy.example.com/v1/query"


def test_local_strips_trailing_slash():
    config = ClientConfig.local("http://localhost:8000/")

    assert config.url_for("/detect") == "http://localhost:8000/detect"
    assert config.token is None


def test_remote_headers_carry_bearer_token():
    headers = ClientConfig.remote("secret").request_headers()

    assert headers["Authorization"] == "Bearer secret"
    assert headers["Content-Type"] == "application/json"


def test_local_headers_never_carry_authorization():
    config = ClientConfig.local("http://localhost:8000", headers=(("Authorization", "Bearer leak"),))

    assert "Authorization" not in config.request_headers()


def test_local_headers_drop_authorization_in_any_case():
    config = ClientConfig.local("http://localhost:8000", headers=(("authorization", "Bearer leak"),))

    headers = config.request_headers()

    assert "Authorization" not in headers
    assert "authorization" not in headers


def test_remote_headers_carry_only_the_configured_token():
    config = ClientConfig.remote("secret", headers=(("AUTHORIZATION", "Bearer other"),))

    assert config.request_headers().getall("Authorization") == ["Bearer secret"]


def test_content_type_is_always_json():
    config = ClientConfig.local("http://localhost:8000", headers=(("content-type", "text/plain"),))

    assert config.request_headers().getall("Content-Type") == ["application/json"]


def test_caller_accept_header_is_kept():
    config = ClientConfig.local("http://localhost:8000", headers=(("Accept", "application/problem+json"),))

    assert config.request_headers()["accept"] == "application/problem+json"


def test_local_ignores_token():
    config = ClientConfig(endpoint="http://localhost:8000", auth_mode=AuthMode.LOCAL, token="tok")

    assert config.token is None


def test_extra_headers_are_merged():
    config = ClientConfig.remote("tok", headers=(("X-Client", "cli"),))

    assert config.request_headers()["X-Client"] == "cli"


def test_config_immutable():
    """Frozen dataclass: attribute assignment must fail."""
    config = ClientConfig.local("http://localhost:8000")

    with pytest.raises(Exception):
        config.endpoint = "http://other"


def test_repr_hides_token():
    assert "secret" not in repr(ClientConfig.remote("secret"))


@pytest.mark.parametrize("endpoint", ["", "localhost:8000", "ftp://host"])
def test_bad_endpoint_fails(endpoint):
    with pytest.raises(ValidationError):
        ClientConfig.local(endpoint)


@pytest.mark.parametrize("token", ["", None])
def test_remote_requires_token(token):
    with pytest.raises(ValidationError):
        ClientConfig.remote(token)


@pytest.mark.parametrize("timeout", [0, -1, "5", True])
def test_bad_timeout_fails(timeout):
    with pytest.raises(ValidationError):
        ClientConfig.local("http://localhost:8000", timeout=timeout)


# ── from_env ──────────────────────────────────────────────────────────────────


def test_from_env_remote(clean_env):
    clean_env.setenv("MOONDREAM_API_KEY", "md-key")

    config = ClientConfig.from_env()

    assert config.auth_mode is AuthMode.REMOTE
    assert config.token == "md-key"
    assert config.endpoint == HOSTED_ENDPOINT


def test_from_env_endpoint_means_local(clean_env):
    clean_env.setenv("MOONDREAM_ENDPOINT", "http://localhost:2020/v1")
    clean_env.setenv("MOONDREAM_API_KEY", "md-key")

    config = ClientConfig.from_env()

    assert config.auth_mode is AuthMode.LOCAL
    assert config.token is None
    assert config.endpoint == "http://localhost:2020/v1"


def test_from_env_timeout(clean_env):
    clean_env.setenv("MOONDREAM_API_KEY", "md-key")
    clean_env.setenv("MOONDREAM_TIMEOUT", "12.5")

    assert ClientConfig.from_env().timeout == 12.5


def test_from_env_bad_timeout_fails(clean_env):
    clean_env.setenv("MOONDREAM_API_KEY", "md-key")
    clean_env.setenv("MOONDREAM_TIMEOUT", "soon")

    with pytest.raises(ValidationError, match="MOONDREAM_TIMEOUT"):
        ClientConfig.from_env()


def test_from_env_missing_key_fails(clean_env):
    """Neither MOONDREAM_ENDPOINT nor MOONDREAM_API_KEY must raise."""
    with pytest.raises(ValidationError, match="MOONDREAM_API_KEY"):
        ClientConfig.from_env()
