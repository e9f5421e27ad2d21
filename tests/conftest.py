from collections.abc import Callable
from typing import Any

import pytest

from cardsifter.services.session import BrowserSession

CardFactory = Callable[..., dict[str, str]]


def _make_card(code: str, **fields: Any) -> dict[str, str]:
    """Build a card row with every column the pipeline reads."""
    card = {
        "code": code,
        "number": "100",
        "edition": "1",
        "character": "Character",
        "series": "Series",
        "wishlists": "0",
        "morphed": "No",
        "trimmed": "No",
        "frame": "",
        "dye.name": "",
        "tag": "",
        "worker.effort": "0",
    }
    for name, value in fields.items():
        card[name.replace("__", ".")] = str(value)
    return card


@pytest.fixture
def make_card() -> CardFactory:
    """Factory for card rows; use dye__name= for the dye.name column."""
    return _make_card


@pytest.fixture
def sample_cards() -> list[dict[str, str]]:
    """A small mixed collection."""
    return [
        _make_card(
            "a1",
            character="Naruto Uzumaki",
            series="Naruto",
            number="12",
            wishlists="150",
            edition="1",
            tag="fav",
        ),
        _make_card(
            "b2",
            character="Monkey D. Luffy",
            series="One Piece",
            number="340",
            wishlists="980",
            edition="2",
            morphed="Yes",
            frame="Ornate Frame",
        ),
        _make_card(
            "c3",
            character="Sasuke Uchiha",
            series="Naruto Shippuden",
            number="7",
            wishlists="75",
            edition="3",
            trimmed="Yes",
            dye__name="Crimson",
            tag="trade",
        ),
        _make_card(
            "d4",
            character="Roronoa Zoro",
            series="One Piece",
            number="2100",
            wishlists="12",
            edition="1",
            tag="  ",
        ),
        _make_card(
            "e5",
            character="Levi Ackerman",
            series="Attack on Titan",
            number="55",
            wishlists="",
            edition="4",
            tag="Favorite burn",
        ),
    ]


@pytest.fixture
def numbered_cards() -> list[dict[str, str]]:
    """120 cards with codes c000..c119 in load order."""
    return [_make_card(f"c{i:03d}", number=str(i)) for i in range(120)]


@pytest.fixture
def session(sample_cards: list[dict[str, str]]) -> BrowserSession:
    """A session with the sample collection loaded."""
    browser = BrowserSession(page_size=10)
    browser.load_dataset(sample_cards)
    return browser
