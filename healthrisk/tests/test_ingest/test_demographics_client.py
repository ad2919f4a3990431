"""Tests for the World Bank demographics client."""

import httpx
import respx

from healthrisk.ingest.demographics_client import DemographicsClient

BASE_URL = "https://wb.test/v2"
INDICATOR_URL = f"{BASE_URL}/country/CA/indicator/SP.POP.65UP.TO.ZS"


class TestElderlyPercent:
    @respx.mock
    def test_most_recent_non_null(self):
        respx.get(url__startswith=INDICATOR_URL).mock(
            return_value=httpx.Response(200, json=[
                {"page": 1, "pages": 1},
                [
                    {"date": "2023", "value": None},
                    {"date": "2022", "value": 19.3},
                    {"date": "2021", "value": 18.9},
                ],
            ])
        )
        assert DemographicsClient(base_url=BASE_URL).elderly_percent("CA") == 19.3

    @respx.mock
    def test_specific_year(self):
        route = respx.get(url__startswith=INDICATOR_URL).mock(
            return_value=httpx.Response(200, json=[{}, [{"date": "2020", "value": 18.0}]])
        )
        assert DemographicsClient(base_url=BASE_URL).elderly_percent("CA", 2020) == 18.0
        assert route.calls[0].request.url.params["date"] == "2020"

    @respx.mock
    def test_unknown_country_message(self):
        respx.get(url__startswith=f"{BASE_URL}/country/ZZ").mock(
            return_value=httpx.Response(200, json=[{"message": [{"key": "Invalid value"}]}])
        )
        assert DemographicsClient(base_url=BASE_URL).elderly_percent("ZZ") is None

    @respx.mock
    def test_http_error(self):
        respx.get(url__startswith=INDICATOR_URL).mock(return_value=httpx.Response(502))
        assert DemographicsClient(base_url=BASE_URL).elderly_percent("CA") is None
