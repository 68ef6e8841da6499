"""Integration coverage for configuration metadata endpoints."""

from http import HTTPStatus

from flask.testing import FlaskClient

from salarytax.backend.version import get_project_version


def test_meta_endpoint(client: FlaskClient) -> None:
    response = client.get("/api/v1/config/meta")

    assert response.status_code == HTTPStatus.OK
    assert response.get_json() == {"version": get_project_version()}


def test_list_years_endpoint(client: FlaskClient) -> None:
    response = client.get("/api/v1/config/years")

    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    assert [entry["year"] for entry in payload["years"]] == [2019, 2020, 2021, 2022]
    assert payload["years"][0]["status"] == "archived"
    assert payload["years"][-1]["status"] == "active"
    assert payload["default_year"] == 2022
    assert payload["limits"] == {"min_income": 0, "max_income": 10_000_000}
