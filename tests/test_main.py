"""Tests for the FastAPI surface and the CLI entrypoint."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from factories import NOW, make_metric, make_series
from keyword_niche import cli
from keyword_niche.main import app
from keyword_niche.schemas import (
    BatchResult,
    BatchSummary,
    CompetitionIndex,
    ExpandResult,
    SearchVolumeData,
    TrendingResult,
)
from keyword_niche.scoring.niche_scoring import calculate_niche_score
from keyword_niche.utils.exceptions import (
    NaverAPIError,
    NaverCredentialsError,
    NaverTransportError,
)

CREDENTIAL_ENV = {
    "NAVER_SEARCHAD_CUSTOMER_ID": "1234567",
    "NAVER_SEARCHAD_API_KEY": "searchad-key",
    "NAVER_SEARCHAD_SECRET_KEY": "searchad-secret",
    "NAVER_CLIENT_ID": "client-id",
    "NAVER_CLIENT_SECRET": "client-secret",
}


@pytest.fixture
def client(monkeypatch: pytest.MonkeyPatch):
    for key, value in CREDENTIAL_ENV.items():
        monkeypatch.setenv(key, value)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def volume_data() -> SearchVolumeData:
    return SearchVolumeData(
        keyword="가을",
        total_monthly_searches=300,
        pc_searches=100,
        mobile_searches=200,
        competition_index=CompetitionIndex.MEDIUM,
        related_keywords=[make_metric("가을코디", 10, 20)],
    )


# ---------------------------------------------------------------------------
# API
# ---------------------------------------------------------------------------

class TestApi:
    def test_health(self, client: TestClient):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    @pytest.mark.parametrize("body", [
        {"keyword": ""},
        {"keyword": "   "},
        {"keyword": "가" * 41},
        {"keyword": "가을", "unexpected": True},
        {},
    ])
    def test_keyword_validation(self, client: TestClient, body: dict):
        response = client.post("/tools/search_volume", json=body)
        assert response.status_code == 422

    def test_expand_count_bounds(self, client: TestClient):
        response = client.post(
            "/tools/keyword_expand", json={"keyword": "가을", "full_score_count": 21},
        )
        assert response.status_code == 422

    def test_batch_bounds(self, client: TestClient):
        response = client.post(
            "/tools/batch_analyze", json={"keywords": [f"k{i}" for i in range(11)]},
        )
        assert response.status_code == 422

    def test_padded_keyword_at_length_limit(self, client: TestClient, volume_data):
        keyword = "가" * 40
        with patch(
            "keyword_niche.main.run_search_volume", AsyncMock(return_value=volume_data),
        ) as mock_run:
            response = client.post(
                "/tools/search_volume", json={"keyword": f"  {keyword}  "},
            )

        assert response.status_code == 200
        assert mock_run.await_args.args[1] == keyword

    def test_search_volume(self, client: TestClient, volume_data):
        with patch(
            "keyword_niche.main.run_search_volume", AsyncMock(return_value=volume_data),
        ) as mock_run:
            response = client.post("/tools/search_volume", json={"keyword": " 가을 "})

        assert response.status_code == 200
        assert response.json()["total_monthly_searches"] == 300
        assert response.json()["competition_index"] == "중간"
        assert mock_run.await_args.args[1] == "가을"

    def test_keyword_expand(self, client: TestClient):
        result = ExpandResult(
            seed_keyword="희귀", error="No related keywords", analyzed_at=NOW,
        )
        with patch(
            "keyword_niche.main.run_expand", AsyncMock(return_value=result),
        ) as mock_run:
            response = client.post(
                "/tools/keyword_expand", json={"keyword": "희귀", "full_score_count": 5},
            )

        assert response.status_code == 200
        assert response.json() == {"seed_keyword": "희귀", "error": "No related keywords"}
        assert mock_run.await_args.args[1:] == ("희귀", 5)

    def test_niche_score(
        self, client: TestClient, sample_volume_data, sample_competition, flat_trend,
    ):
        result = calculate_niche_score(
            sample_volume_data, sample_competition, flat_trend, now=NOW,
        )
        with patch(
            "keyword_niche.main.run_niche_score", AsyncMock(return_value=result),
        ):
            response = client.post("/tools/niche_score", json={"keyword": "가을 패션"})

        assert response.status_code == 200
        assert response.json()["total_score"] == 90.0
        assert response.json()["grade"] == "A"

    def test_trend(self, client: TestClient):
        series = make_series([50.0] * 3)
        with patch("keyword_niche.main.run_trend", AsyncMock(return_value=series)):
            response = client.post("/tools/trend", json={"keyword": "가을패션"})

        assert response.status_code == 200
        assert len(response.json()["results"]) == 3

    def test_batch_analyze(self, client: TestClient):
        result = BatchResult(
            summary=BatchSummary(total=1, analyzed=0, failed=1, duration_ms=3),
        )
        with patch("keyword_niche.main.run_batch", AsyncMock(return_value=result)):
            response = client.post("/tools/batch_analyze", json={"keywords": ["a"]})

        assert response.status_code == 200
        assert response.json()["summary"]["failed"] == 1

    def test_trending_discover(self, client: TestClient):
        result = TrendingResult(seed_keyword="가을", error="none found")
        with patch(
            "keyword_niche.main.run_trending_discover", AsyncMock(return_value=result),
        ):
            response = client.post("/tools/trending_discover", json={"keyword": "가을"})

        assert response.json() == {
            "seed_keyword": "가을", "rising_keywords": [], "error": "none found",
        }

    def test_missing_credentials_is_503(self, client: TestClient):
        error = NaverCredentialsError("SearchAd", ["NAVER_SEARCHAD_API_KEY"])
        with patch("keyword_niche.main.run_niche_score", AsyncMock(side_effect=error)):
            response = client.post("/tools/niche_score", json={"keyword": "가을"})

        assert response.status_code == 503
        assert "NAVER_SEARCHAD_API_KEY" in response.json()["error"]

    def test_upstream_error_is_502(self, client: TestClient):
        error = NaverAPIError("DataLab", 500, "boom")
        with patch("keyword_niche.main.run_trend", AsyncMock(side_effect=error)):
            response = client.post("/tools/trend", json={"keyword": "가을"})

        assert response.status_code == 502
        assert response.json() == {
            "error": "DataLab API error (500): boom", "upstream_status": 500,
        }

    def test_unreachable_upstream_is_502(self, client: TestClient):
        error = NaverTransportError("DataLab", "connection refused")
        with patch("keyword_niche.main.run_trend", AsyncMock(side_effect=error)):
            response = client.post("/tools/trend", json={"keyword": "가을"})

        assert response.status_code == 502
        assert response.json() == {
            "error": "DataLab API unreachable: connection refused",
        }


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

class TestCli:
    def test_volume_mode_prints_json(self, capsys, volume_data):
        with patch(
            "keyword_niche.cli.run_search_volume", AsyncMock(return_value=volume_data),
        ):
            code = cli.main(["--mode", "volume", "--keyword", "가을"])

        assert code == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["keyword"] == "가을"
        assert payload["top_related"][0]["keyword"] == "가을코디"

    def test_batch_mode_passes_every_keyword(self, capsys):
        result = BatchResult(
            summary=BatchSummary(total=2, analyzed=0, failed=2, duration_ms=1),
        )
        with patch(
            "keyword_niche.cli.run_batch", AsyncMock(return_value=result),
        ) as mock_run:
            code = cli.main(["--mode", "batch", "--keyword", "a", "--keyword", "b"])

        assert code == 0
        assert mock_run.await_args.args[1] == ["a", "b"]
        assert json.loads(capsys.readouterr().out)["summary"]["total"] == 2

    def test_upstream_error_exits_nonzero(self, capsys):
        with patch(
            "keyword_niche.cli.run_niche_score",
            AsyncMock(side_effect=NaverAPIError("SearchAd", 500, "boom")),
        ):
            code = cli.main(["--mode", "niche", "--keyword", "가을"])

        assert code == 1
        assert capsys.readouterr().out == ""

    def test_unreachable_upstream_exits_nonzero(self, capsys):
        with patch(
            "keyword_niche.cli.run_niche_score",
            AsyncMock(side_effect=NaverTransportError("SearchAd", "down")),
        ):
            code = cli.main(["--mode", "niche", "--keyword", "가을"])

        assert code == 1
        assert capsys.readouterr().out == ""

    @pytest.mark.parametrize("argv", [
        ["--mode", "niche"],
        ["--mode", "niche", "--keyword", "a", "--keyword", "b"],
        ["--mode", "niche", "--keyword", "   "],
        ["--mode", "expand", "--keyword", "a", "--top", "0"],
        ["--mode", "unknown", "--keyword", "a"],
        ["--mode", "batch"],
    ])
    def test_invalid_arguments(self, argv: list[str]):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(argv)
        assert exc_info.value.code == 2
