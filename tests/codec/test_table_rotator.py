import pytest

from authlink.codec.options import DEFAULT_OBFUSCATION_TABLE, STANDARD_ALPHABET
from authlink.codec.table_rotator import rotate_table, rotation_bucket

T = 1700000000000
DAY = 86400 * 1000
BUCKET_START = 19675 * DAY


@pytest.mark.unit
def test_rotation_bucket_floors_to_period():
    assert rotation_bucket(T) == 19675
    assert rotation_bucket(BUCKET_START) == 19675
    assert rotation_bucket(BUCKET_START - 1) == 19674
    assert rotation_bucket(T, rotation_period_seconds=3600) == T // 3600000


@pytest.mark.unit
def test_rotate_table_is_deterministic():
    first = rotate_table(T)
    assert rotate_table(T + 5) == first
    assert rotate_table(T) == first
    assert rotate_table(T, DEFAULT_OBFUSCATION_TABLE, 86400) == first


@pytest.mark.unit
def test_rotate_table_same_within_bucket():
    assert rotate_table(BUCKET_START) == rotate_table(BUCKET_START + DAY - 1)


@pytest.mark.unit
def test_rotate_table_changes_between_buckets():
    assert rotate_table(T) != rotate_table(T + DAY)
    assert rotate_table(T) != rotate_table(T - DAY)


@pytest.mark.unit
def test_rotate_table_is_permutation():
    rotated = rotate_table(T)

    assert len(rotated) == len(DEFAULT_OBFUSCATION_TABLE)
    assert sorted(rotated) == sorted(DEFAULT_OBFUSCATION_TABLE)
    assert rotated != DEFAULT_OBFUSCATION_TABLE


@pytest.mark.unit
def test_rotate_table_small_known_shuffle():
    # Bucket 0: draws 0.236 and 0.279 give j=0 then j=0
    assert rotate_table(0, "ab") == "ba"
    assert rotate_table(0, "abc") == "bca"


@pytest.mark.unit
def test_rotate_table_truncates_to_alphabet_size():
    rotated = rotate_table(T, STANDARD_ALPHABET + "-._")

    assert len(rotated) == 64
    assert sorted(rotated) == sorted(STANDARD_ALPHABET)


@pytest.mark.unit
@pytest.mark.parametrize("table", ["", "x"])
def test_rotate_table_trivial_tables_unchanged(table):
    assert rotate_table(T, table) == table


@pytest.mark.unit
def test_rotate_table_respects_rotation_period():
    hour = 3600 * 1000
    start = (T // hour) * hour

    assert rotate_table(start, rotation_period_seconds=3600) == \
        rotate_table(start + hour - 1, rotation_period_seconds=3600)
    assert rotate_table(start, rotation_period_seconds=3600) != \
        rotate_table(start + hour, rotation_period_seconds=3600)
