import pytest

from authlink.codec.options import STANDARD_ALPHABET
from authlink.codec.shift import apply_shift, reverse_shift


@pytest.mark.unit
@pytest.mark.parametrize(
    "text,amount,expected",
    [
        ("A", 3, "D"),
        ("aGk", 3, "dJn"),
        ("/", 1, "A"),
        ("A", -1, "/"),
        ("9+/", 2, "/AB"),
        ("A", 64 + 3, "D"),
        ("D", -67, "A"),
    ],
)
def test_apply_shift_wraps_around_alphabet(text, amount, expected):
    assert apply_shift(text, amount) == expected


@pytest.mark.unit
def test_non_alphabet_characters_pass_through():
    assert apply_shift("ab==", 1) == "bc=="
    assert apply_shift("_-. é", 5) == "_-. é"


@pytest.mark.unit
@pytest.mark.parametrize("amount", [-130, -3, 0, 1, 3, 63, 64, 200])
def test_reverse_undoes_apply(amount):
    text = STANDARD_ALPHABET + "=_-. eyJ1dWlkIjoiYWJjIn0="

    assert reverse_shift(apply_shift(text, amount), amount) == text
    assert apply_shift(reverse_shift(text, amount), amount) == text


@pytest.mark.unit
def test_zero_shift_is_identity():
    text = "eyJ1dWlkIjoiYWJjIn0="

    assert apply_shift(text, 0) == text
    assert apply_shift(apply_shift(text, 0), 0) == text
