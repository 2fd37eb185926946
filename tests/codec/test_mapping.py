import pytest

from authlink.codec.mapping import build_mapping, substitute
from authlink.codec.options import DEFAULT_OBFUSCATION_TABLE, STANDARD_ALPHABET
from authlink.codec.table_rotator import rotate_table

# Table shipped by older issuers; '_' at index 61 collides with the padding sentinel
LEGACY_ISSUER_TABLE = "jQNHxo9a1zVG8dFcyb27XmiwOl0WULnkPsBKqEAZYfer3t5RMDSCJhgvu4pT-_"


@pytest.mark.unit
@pytest.mark.parametrize("table", [DEFAULT_OBFUSCATION_TABLE, rotate_table(1700000000000), ""])
def test_mapping_is_total(table):
    mapping = build_mapping(table)

    for c in STANDARD_ALPHABET + "=":
        assert c in mapping.forward
        assert mapping.forward[c] in mapping.inverse


@pytest.mark.unit
def test_default_table_round_trips_every_symbol():
    mapping = build_mapping(DEFAULT_OBFUSCATION_TABLE)

    assert len(set(mapping.forward[c] for c in STANDARD_ALPHABET)) == 64
    for c in STANDARD_ALPHABET:
        assert mapping.inverse[mapping.forward[c]] == c


@pytest.mark.unit
def test_short_table_falls_back_to_standard_symbols():
    mapping = build_mapping(DEFAULT_OBFUSCATION_TABLE)

    assert mapping.forward['A'] == 'j'
    assert mapping.forward['+'] == '+'
    assert mapping.forward['/'] == '/'
    assert mapping.inverse['j'] == 'A'


@pytest.mark.unit
def test_padding_pair_is_fixed():
    mapping = build_mapping(DEFAULT_OBFUSCATION_TABLE)

    assert mapping.forward['='] == '_'
    assert mapping.inverse['_'] == '='


@pytest.mark.unit
def test_duplicate_symbols_keep_last_assignment():
    table = "AA" + STANDARD_ALPHABET[2:]
    mapping = build_mapping(table)

    assert mapping.forward['A'] == 'A'
    assert mapping.forward['B'] == 'A'
    assert mapping.inverse['A'] == 'B'


@pytest.mark.unit
def test_sentinel_in_table_loses_to_padding():
    mapping = build_mapping(LEGACY_ISSUER_TABLE)

    assert mapping.forward['9'] == '_'
    assert mapping.inverse['_'] == '='


@pytest.mark.unit
def test_substitute_passes_unknown_characters():
    mapping = build_mapping(DEFAULT_OBFUSCATION_TABLE)

    assert substitute("AB=!", mapping.forward) == "jQ_!"
    assert substitute("jQ_!", mapping.inverse) == "AB=!"
