from __future__ import annotations

import http.client
import io
import json
from typing import Any
from urllib import error

import pytest

from movierank.clients import (
    MetadataFetchError,
    OMDbClient,
    RankingServiceClient,
    ServiceError,
)


class FakeResponse:
    def __init__(self, status: int, body: Any):
        self.status = status
        self._body = body if isinstance(body, str) else json.dumps(body)

    def read(self) -> bytes:
        return self._body.encode("utf-8")

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        return None


class FakeOpener:
    def __init__(self, *responses: FakeResponse | Exception):
        self._responses = list(responses)
        self.requests: list[Any] = []

    def __call__(self, req, timeout=None):
        self.requests.append(req)
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def opener(monkeypatch: pytest.MonkeyPatch):
    def install(*responses: FakeResponse | Exception) -> FakeOpener:
        fake = FakeOpener(*responses)
        monkeypatch.setattr("urllib.request.urlopen", fake)
        return fake

    return install


def test_omdb_client_fetches_and_parses(opener):
    fake = opener(
        FakeResponse(
            200,
            {
                "imdbID": "tt0111161",
                "Title": "The Shawshank Redemption",
                "Year": "1994",
                "Ratings": [{"Source": "Rotten Tomatoes", "Value": "89%"}],
                "Response": "True",
            },
        )
    )
    client = OMDbClient(api_key="key123")

    movie = client.fetch_movie("tt0111161")

    assert movie.title == "The Shawshank Redemption"
    assert movie.ratings[0].source == "Rotten Tomatoes"
    url = fake.requests[0].full_url
    assert url.startswith("https://www.omdbapi.com/?")
    assert "i=tt0111161" in url
    assert "apikey=key123" in url
    assert "plot=full" in url


def test_omdb_client_raises_on_error_body(opener):
    opener(FakeResponse(200, {"Response": "False", "Error": "Incorrect IMDb ID."}))
    client = OMDbClient(api_key="key123")

    with pytest.raises(MetadataFetchError) as exc:
        client.fetch_movie("tt-bad")

    assert exc.value.movie_id == "tt-bad"
    assert "key123" not in exc.value.url


def test_omdb_client_raises_on_http_error(opener):
    opener(error.HTTPError("https://www.omdbapi.com/", 401, "Unauthorized", {}, io.BytesIO(b"")))
    client = OMDbClient(api_key="key123")

    with pytest.raises(MetadataFetchError) as exc:
        client.fetch_movie("tt1")

    assert exc.value.status == 401


def test_service_client_gets_prompt(opener):
    fake = opener(
        FakeResponse(
            200,
            {
                "movies": ["tt1", "tt2"],
                "people": [{"name": "Alex", "preferences": {"afterYear": {"value": 1990, "weight": 1}}}],
            },
        )
    )
    client = RankingServiceClient("https://service.test/", "tok")

    prompt = client.get_prompt()

    assert prompt.movies == ["tt1", "tt2"]
    assert fake.requests[0].full_url == "https://service.test/tok/prompt"
    assert fake.requests[0].get_method() == "GET"


def test_service_client_submits_ranking(opener):
    fake = opener(FakeResponse(201, "87.5"))
    client = RankingServiceClient("https://service.test", "tok")

    achieved = client.submit_ranking(["tt2", "tt1"])

    assert achieved == pytest.approx(87.5)
    req = fake.requests[0]
    assert req.full_url == "https://service.test/tok/submit"
    assert req.get_method() == "POST"
    assert json.loads(req.data.decode("utf-8")) == ["tt2", "tt1"]


def test_service_client_rejects_unexpected_status(opener):
    opener(FakeResponse(200, "10"))
    client = RankingServiceClient("https://service.test", "tok")

    with pytest.raises(ServiceError) as exc:
        client.submit_ranking(["tt1"])

    assert exc.value.status == 200


def test_service_client_wraps_transport_errors(opener):
    opener(error.URLError("connection refused"))
    client = RankingServiceClient("https://service.test", "tok")

    with pytest.raises(ServiceError) as exc:
        client.get_prompt()

    assert exc.value.status is None
    assert "connection refused" in str(exc.value)


class TimingOutResponse(FakeResponse):
    def read(self) -> bytes:
        raise TimeoutError("timed out")


def test_omdb_client_wraps_read_timeout(opener):
    opener(TimingOutResponse(200, ""))
    client = OMDbClient(api_key="key123")

    with pytest.raises(MetadataFetchError) as exc:
        client.fetch_movie("tt1")

    assert exc.value.movie_id == "tt1"
    assert exc.value.status is None


def test_service_client_wraps_broken_connection_and_bad_encoding(opener):
    class UndecodableResponse(FakeResponse):
        def read(self) -> bytes:
            return b"\xff\xfe\xfa"

    opener(
        http.client.RemoteDisconnected("Remote end closed connection"),
        UndecodableResponse(200, ""),
    )
    client = RankingServiceClient("https://service.test", "tok")

    with pytest.raises(ServiceError):
        client.get_prompt()
    with pytest.raises(ServiceError):
        client.get_prompt()


def test_service_errors_never_expose_token(opener):
    opener(
        error.HTTPError("https://service.test/SECRET-TOKEN/prompt", 500, "Server Error", {}, io.BytesIO(b"")),
        FakeResponse(201, {"not": "a number"}),
    )
    client = RankingServiceClient("https://service.test", "SECRET-TOKEN")

    with pytest.raises(ServiceError) as prompt_exc:
        client.get_prompt()
    with pytest.raises(ServiceError) as submit_exc:
        client.submit_ranking(["tt1"])

    for exc in (prompt_exc.value, submit_exc.value):
        assert "SECRET-TOKEN" not in str(exc)
        assert "SECRET-TOKEN" not in exc.url
    assert prompt_exc.value.url == "https://service.test/***/prompt"
