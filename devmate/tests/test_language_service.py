import asyncio

import httpx
import pytest

from conftest import FakeJudge0
from devmate.services.language_service import DEFAULT_LANGUAGE_IDS, match_catalog, resolve_language_id

CATALOG = [
    {"id": 45, "name": "Assembly (NASM 2.14.02)"},
    {"id": 60, "name": "Go (1.13.5)"},
    {"id": 95, "name": "Go (1.18.5)"},
    {"id": 73, "name": "Rust (1.40.0)"},
    {"id": 78, "name": "Kotlin (1.3.70)", "slug": "kt"},
    {"id": 200, "name": "Something", "slug": "zigzag"},
]


def resolve(judge0: FakeJudge0, language: str):
    return asyncio.run(resolve_language_id(judge0.client(), language))


@pytest.mark.parametrize("label,expected", sorted(DEFAULT_LANGUAGE_IDS.items()))
def test_static_table_skips_catalog(label, expected):
    judge0 = FakeJudge0(catalog=CATALOG)
    assert resolve(judge0, label) == expected
    assert judge0.requests == []


def test_static_table_values():
    assert DEFAULT_LANGUAGE_IDS == {'python': 71, 'javascript': 63, 'java': 62, 'c': 50, 'c++': 54}


def test_static_lookup_ignores_case_and_padding():
    judge0 = FakeJudge0(catalog=CATALOG)
    assert resolve(judge0, "  Python ") == 71
    assert judge0.requests == []


def test_catalog_name_match():
    judge0 = FakeJudge0(catalog=CATALOG)
    assert resolve(judge0, "rust") == 73
    assert judge0.count("GET", "/languages") == 1


def test_catalog_match_is_case_insensitive():
    assert resolve(FakeJudge0(catalog=CATALOG), "RuSt") == 73


def test_catalog_slug_match():
    assert resolve(FakeJudge0(catalog=CATALOG), "zig") == 200


def test_first_catalog_match_wins():
    assert resolve(FakeJudge0(catalog=CATALOG), "go") == 60


def test_no_match_is_unsupported():
    judge0 = FakeJudge0(catalog=CATALOG)
    assert resolve(judge0, "brainfudge") is None
    assert judge0.count("POST", "/submissions") == 0


def test_catalog_http_error_is_treated_as_no_match():
    judge0 = FakeJudge0(catalog={"message": "You are not subscribed to this API."}, catalog_status=403)
    assert resolve(judge0, "rust") is None


def test_catalog_connection_error_is_treated_as_no_match():
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    judge0 = FakeJudge0()
    judge0.handler = refuse
    assert resolve(judge0, "rust") is None


def test_catalog_that_is_not_a_list_is_treated_as_no_match():
    assert resolve(FakeJudge0(catalog={"languages": CATALOG}), "rust") is None


class TestMatchCatalog:

    def test_returns_entry(self):
        assert match_catalog(CATALOG, "kotlin")["id"] == 78

    def test_preserves_catalog_order(self):
        reordered = [CATALOG[2], CATALOG[1]]
        assert match_catalog(reordered, "go")["id"] == 95

    def test_skips_malformed_entries(self):
        assert match_catalog(["rust", None, {"id": 73, "name": "Rust"}], "rust")["id"] == 73

    def test_blank_label_matches_nothing(self):
        assert match_catalog(CATALOG, "  ") is None
