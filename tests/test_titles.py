import allure
import pytest

from reading_lists.lists.titles import derive_display_title

pytestmark = [
    allure.epic("Reading Lists"),
    allure.feature("List Repository"),
]


@pytest.mark.parametrize(
    ("article_key", "expected"),
    [
        ("https://en.wikipedia.org/wiki/Paris", "Paris"),
        ("https://en.wikipedia.org/wiki/New_York_City", "New York City"),
        ("https://fr.wikipedia.org/wiki/%C3%8Ele-de-France", "Île-de-France"),
        ("https://en.wikipedia.org/w/index.php?title=Rome_(city)", "Rome (city)"),
        ("https://en.wikipedia.org/wiki/Paris#History", "Paris"),
    ],
)
def test_derive_display_title_extracts_title(article_key: str, expected: str) -> None:
    assert derive_display_title(article_key) == expected


@pytest.mark.parametrize(
    "article_key",
    [
        "not a url",
        "https://en.wikipedia.org/",
        "https://en.wikipedia.org/wiki/",
        "/wiki/Paris",
        "http://[::1",
    ],
)
def test_derive_display_title_returns_none_without_title(article_key: str) -> None:
    assert derive_display_title(article_key) is None
