import importlib.util
import sys

import pytest

from fibserver.app.main import create_app
from fibserver.app.routes_fibonacci import create_router, max_term_digits, render_plaintext
from fibserver.models.dto import OutputFormat, Settings
from fibserver.service.fibonacci_service import fibonacci_sequence

HTTPX_AVAILABLE = importlib.util.find_spec("httpx") is not None


def make_client(**overrides):
    if not HTTPX_AVAILABLE:
        pytest.skip("httpx is required for API-level tests")

    from fastapi.testclient import TestClient

    return TestClient(create_app(Settings(**overrides)))


@pytest.fixture()
def client():
    return make_client()


@pytest.fixture()
def json_client():
    return make_client(output=OutputFormat.json)


def test_fibonacci_endpoint_returns_plaintext(client) -> None:
    response = client.get("/", params={"n": 5})

    assert response.status_code == 200
    assert response.text == "0, 1, 1, 2, 3"
    assert response.headers["content-type"].startswith("text/plain")


def test_fibonacci_endpoint_returns_json_strings(json_client) -> None:
    response = json_client.get("/", params={"n": 5})

    assert response.status_code == 200
    assert response.text == '["0","1","1","2","3"]'
    assert response.headers["content-type"] == "application/json"
    assert response.json() == ["0", "1", "1", "2", "3"]


def test_fibonacci_endpoint_zero_count(client, json_client) -> None:
    plain = client.get("/", params={"n": 0})
    assert plain.status_code == 200
    assert plain.text == ""

    js = json_client.get("/", params={"n": 0})
    assert js.status_code == 200
    assert js.text == "[]"


def test_fibonacci_endpoint_big_numbers_keep_precision(json_client) -> None:
    response = json_client.get("/", params={"n": 101})

    body = response.json()
    assert len(body) == 101
    assert body[100] == "354224848179261915075"


def test_fibonacci_endpoint_accepts_limit(client) -> None:
    response = client.get("/", params={"n": 10000})

    assert response.status_code == 200
    assert len(response.text.split(", ")) == 10000


@pytest.mark.parametrize("query", ["/", "/?n=", "/?m=5"])
def test_fibonacci_endpoint_missing_n(client, query) -> None:
    response = client.get(query)

    assert response.status_code == 422
    assert "n url parameter is missing" in response.text
    assert response.headers["content-type"].startswith("text/plain")


@pytest.mark.parametrize("value", ["abc", "1.5", " 5", "5_0", "-1", "10001", "99999", "9" * 5000])
def test_fibonacci_endpoint_rejects_invalid_n(client, value) -> None:
    response = client.get("/", params={"n": value})

    assert response.status_code == 422
    assert response.text == "Error: n must be an integer between 0 and 10000"


def test_fibonacci_endpoint_respects_configured_limit() -> None:
    client = make_client(n_limit=10)

    assert client.get("/", params={"n": 10}).status_code == 200

    response = client.get("/", params={"n": 11})
    assert response.status_code == 422
    assert "between 0 and 10" in response.text


def test_fibonacci_endpoint_uses_first_n_value(client) -> None:
    response = client.get("/?n=3&n=abc")

    assert response.status_code == 200
    assert response.text == "0, 1, 1"


def test_fibonacci_endpoint_accepts_explicit_plus_sign(client) -> None:
    response = client.get("/?n=%2B4")

    assert response.status_code == 200
    assert response.text == "0, 1, 1, 2"


def test_unknown_path_returns_empty_404(client) -> None:
    response = client.get("/invalid", params={"n": 5})

    assert response.status_code == 404
    assert response.content == b""


@pytest.fixture()
def restore_int_str_digits():
    if not hasattr(sys, "get_int_max_str_digits"):
        yield
        return
    original = sys.get_int_max_str_digits()
    yield
    sys.set_int_max_str_digits(original)


def test_max_term_digits_covers_last_term() -> None:
    sequence = fibonacci_sequence(3000)

    assert len(str(sequence[-1])) <= max_term_digits(3000)


def test_fibonacci_endpoint_renders_terms_longer_than_4300_digits(restore_int_str_digits) -> None:
    client = make_client(n_limit=30000)

    response = client.get("/", params={"n": 20700})

    assert response.status_code == 200
    last = response.text.rsplit(", ", 1)[-1]
    assert len(last) > 4300
    assert response.text.startswith("0, 1, 1, 2, 3")


def test_large_limit_render_of_single_huge_term(restore_int_str_digits) -> None:
    create_router(Settings(n_limit=30000))
    term = fibonacci_sequence(25000)[-1]

    response = render_plaintext([term])

    assert response.status_code == 200
    assert len(response.body) > 5000
