"""Tests for Fibonacci buffer generation and persistence."""

import numpy as np
import pytest

from fibspiral import sequence
from fibspiral.errors import InvalidInputError, SourceUnavailableError


def test_generate_standard_recurrence():
    samples = sequence.generate_fibonacci(10)
    assert samples.dtype == np.int32
    assert list(samples) == [0, 1, 1, 2, 3, 5, 8, 13, 21, 34, 55]


@pytest.mark.parametrize("last_index, expected", [(0, [0]), (1, [0, 1]), (2, [0, 1, 1])])
def test_generate_short_buffers(last_index, expected):
    assert list(sequence.generate_fibonacci(last_index)) == expected


def test_generate_largest_int32_index():
    samples = sequence.generate_fibonacci(sequence.MAX_FIBONACCI_INDEX)
    assert samples[-1] == 1836311903


@pytest.mark.parametrize("last_index", [-1, sequence.MAX_FIBONACCI_INDEX + 1])
def test_generate_rejects_out_of_range(last_index):
    with pytest.raises(InvalidInputError):
        sequence.generate_fibonacci(last_index)


def test_binary_is_packed_native_int32(tmp_path):
    path = sequence.save_binary([0, 1, 1, 2, 3], tmp_path / "f.bin")
    data = path.read_bytes()
    assert len(data) == 5 * 4
    assert np.frombuffer(data, dtype=np.dtype('=i4')).tolist() == [0, 1, 1, 2, 3]
    assert sequence.load_binary(path).tolist() == [0, 1, 1, 2, 3]


def test_load_binary_ignores_partial_trailing_integer(tmp_path):
    path = tmp_path / "f.bin"
    path.write_bytes(np.array([5, 8], dtype=np.dtype('=i4')).tobytes() + b"\x01\x02")
    assert sequence.load_binary(path).tolist() == [5, 8]


def test_text_listing(tmp_path):
    path = sequence.save_text([0, 1, 1, 2], tmp_path / "f.txt")
    assert path.read_text() == "0 1 1 2 "
    assert sequence.load_text(path).tolist() == [0, 1, 1, 2]


def test_persist_writes_both_formats(tmp_path):
    samples = sequence.generate_fibonacci(8)
    binary_path, text_path = sequence.persist(samples, tmp_path / "out", "seq.bin", "seq.txt")
    assert sequence.load_binary(binary_path).tolist() == samples.tolist()
    assert text_path.read_text().split() == [str(v) for v in samples]


def test_check_source_accepts_readable_bin(tmp_path):
    path = tmp_path / "f.bin"
    path.write_bytes(b"")
    assert sequence.check_source(str(path)) == path


@pytest.mark.parametrize("name", ["", None, ".bin", "sequence.txt", "sequence.bin.gz"])
def test_check_source_rejects_bad_names(tmp_path, name):
    with pytest.raises(SourceUnavailableError) as exc_info:
        sequence.check_source(name)
    assert exc_info.value.code == SourceUnavailableError("").code


def test_check_source_rejects_missing_file(tmp_path):
    with pytest.raises(SourceUnavailableError):
        sequence.check_source(str(tmp_path / "missing.bin"))
