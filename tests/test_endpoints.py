"""Tests for all API endpoints."""
import pytest

from string_analyzer.analyzer import compute_sha256
from string_analyzer.config import settings


class TestCreateStringEndpoint:
    """Tests for POST /strings."""

    def test_create_string_success(self, client):
        response = client.post("/strings", json={"value": "Hello World"})
        assert response.status_code == 201
        data = response.json()
        assert data["value"] == "Hello World"
        assert data["id"] == compute_sha256("Hello World")
        assert data["properties"]["sha256_hash"] == data["id"]
        assert data["properties"]["word_count"] == 2
        assert "created_at" in data

    def test_create_exact_duplicate_conflict(self, client):
        client.post("/strings", json={"value": "Test String"})
        response_dup = client.post("/strings", json={"value": "Test String"})
        assert response_dup.status_code == 409
        assert "error" in response_dup.json()
        # case-variant allowed
        response_case = client.post("/strings", json={"value": "test string"})
        assert response_case.status_code == 201

    def test_create_missing_value(self, client):
        response = client.post("/strings", json={})
        assert response.status_code == 400

    @pytest.mark.parametrize("value", [123, None, ["a"], {"a": 1}, True])
    def test_create_wrong_type(self, client, value):
        response = client.post("/strings", json={"value": value})
        assert response.status_code == 422

    def test_create_invalid_json_body(self, client):
        response = client.post(
            "/strings",
            content=b'{"value": "oops"',  # truncated JSON
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400

    def test_create_too_large(self, client, monkeypatch):
        monkeypatch.setattr(settings, "MAX_STRING_LENGTH", 5)
        response = client.post("/strings", json={"value": "abcdef"})
        assert response.status_code == 413
        assert client.post("/strings", json={"value": "abcde"}).status_code == 201

    def test_create_lone_surrogate(self, client):
        # valid JSON, but not encodable as UTF-8
        response = client.post(
            "/strings",
            content=b'{"value": "\\ud800"}',
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert "UTF-8" in response.json()["error"]

    def test_empty_string_allowed(self, client):
        response = client.post("/strings", json={"value": ""})
        assert response.status_code == 201
        assert response.json()["properties"]["word_count"] == 0


class TestGetStringEndpoint:
    def test_get_by_value(self, client):
        client.post("/strings", json={"value": "test string"})
        response = client.get("/strings/test string")
        assert response.status_code == 200
        assert response.json()["value"] == "test string"

    def test_get_by_id_round_trip(self, client):
        created = client.post("/strings", json={"value": "Round trip ✓"}).json()
        response = client.get(f"/strings/{created['id']}")
        assert response.status_code == 200
        fetched = response.json()
        assert fetched["value"] == created["value"]
        assert fetched["properties"] == created["properties"]
        assert fetched["created_at"] == created["created_at"]

    def test_get_string_not_found(self, client):
        response = client.get("/strings/nonexistent_value")
        assert response.status_code == 404
        assert "not found" in response.json()["error"].lower()


class TestGetAllStringsEndpoint:
    @pytest.fixture(autouse=True)
    def seed(self, client):
        for v in ("hello", "racecar", "hello world", "a"):
            client.post("/strings", json={"value": v})

    def test_get_all_strings(self, client):
        data = client.get("/strings").json()
        assert data["count"] == 4
        assert len(data["data"]) == 4
        assert data["filters_applied"] == {}

    def test_filter_by_palindrome(self, client):
        data = client.get("/strings?is_palindrome=true").json()
        assert data["count"] == 2  # "racecar" and "a"
        assert data["filters_applied"] == {"is_palindrome": True}

    def test_filter_by_lengths(self, client):
        assert client.get("/strings?min_length=5").json()["count"] == 3
        assert client.get("/strings?max_length=5").json()["count"] == 2

    def test_filter_by_word_count(self, client):
        assert client.get("/strings?word_count=1").json()["count"] == 3

    def test_filter_by_contains_character(self, client):
        assert client.get("/strings?contains_character=A").json()["count"] == 2

    def test_filter_combined(self, client):
        response = client.get("/strings?is_palindrome=true&min_length=1&max_length=10")
        assert response.status_code == 200
        assert response.json()["count"] == 2

    @pytest.mark.parametrize("query", [
        "min_length=-1",
        "max_length=-1",
        "word_count=-1",
        "min_length=abc",
        "is_palindrome=maybe",
        "contains_character=abc",
    ])
    def test_invalid_parameters(self, client, query):
        assert client.get(f"/strings?{query}").status_code == 400

    def test_min_greater_than_max(self, client):
        response = client.get("/strings?min_length=10&max_length=5")
        assert response.status_code == 422
        assert response.json()["details"] == {"min_length": 10, "max_length": 5}


class TestFilterByNaturalLanguageEndpoint:
    @pytest.fixture(autouse=True)
    def seed(self, client):
        for v in ("a", "racecar", "hello world", "level"):
            client.post("/strings", json={"value": v})

    def test_single_word_palindromes(self, client):
        response = client.get(
            "/strings/filter-by-natural-language",
            params={"query": "all single word palindromic strings"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 3
        assert data["interpreted_query"] == {
            "original": "all single word palindromic strings",
            "parsed_filters": {"word_count": 1, "is_palindrome": True},
        }

    def test_strings_longer_than(self, client):
        response = client.get(
            "/strings/filter-by-natural-language",
            params={"query": "strings longer than 10 characters"},
        )
        assert response.status_code == 200
        assert response.json()["count"] == 1

    def test_strings_containing_character(self, client):
        response = client.get(
            "/strings/filter-by-natural-language",
            params={"query": "strings containing the letter a"},
        )
        assert response.json()["count"] == 2

    def test_contain_the_first_vowel(self, client):
        response = client.get(
            "/strings/filter-by-natural-language",
            params={"query": "strings that contain the first vowel"},
        )
        # 'a' and 'racecar'
        assert response.json()["count"] == 2

    def test_missing_query_param_results_in_400(self, client):
        assert client.get("/strings/filter-by-natural-language").status_code == 400
        assert client.get("/strings/filter-by-natural-language?query=").status_code == 400

    def test_unparseable_query(self, client):
        response = client.get("/strings/filter-by-natural-language", params={"query": "xyz"})
        assert response.status_code == 400
        body = response.json()
        assert body["details"]["interpreted_query"]["original"] == "xyz"

    def test_oversized_number_in_query(self, client):
        response = client.get(
            "/strings/filter-by-natural-language",
            params={"query": "strings longer than " + "9" * 5000},
        )
        assert response.status_code == 400

    def test_conflicting_query(self, client):
        response = client.get(
            "/strings/filter-by-natural-language",
            params={"query": "longer than 10 and shorter than 3"},
        )
        assert response.status_code == 422


class TestDeleteStringEndpoint:
    def test_delete_string_success(self, client):
        client.post("/strings", json={"value": "to delete"})
        assert client.get("/strings/to delete").status_code == 200
        delete_response = client.delete("/strings/to delete")
        assert delete_response.status_code == 204
        assert delete_response.content == b""
        assert client.get("/strings/to delete").status_code == 404

    def test_delete_by_id(self, client):
        record = client.post("/strings", json={"value": "by id"}).json()
        assert client.delete(f"/strings/{record['id']}").status_code == 204
        assert client.get("/strings").json()["count"] == 0

    def test_delete_nonexistent_string(self, client):
        assert client.delete("/strings/nonexistent_value").status_code == 404


class TestServiceSurface:
    def test_root_ok(self, client):
        r = client.get("/")
        assert r.status_code == 200
        assert "message" in r.json()

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}

    def test_security_headers(self, client):
        r = client.get("/health")
        assert r.headers["x-content-type-options"] == "nosniff"
        assert r.headers["x-frame-options"] == "DENY"

    def test_unknown_route_error_shape(self, client):
        r = client.get("/nope")
        assert r.status_code == 404
        assert "error" in r.json()
