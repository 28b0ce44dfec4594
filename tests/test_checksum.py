"""Tests for content hash helpers."""

import hashlib

import pytest

from gridstore.checksum import IncrementalChecksumCalculator, compute_checksum
from gridstore.exceptions import DigestUnavailableError


class TestIncrementalChecksumCalculator:
    """Test incremental hashing."""

    def test_incremental_matches_one_shot(self):
        calculator = IncrementalChecksumCalculator("md5")
        calculator.update(b"abcd")
        calculator.update(b"efgh")
        calculator.update(b"ij")

        assert calculator.finalize() == hashlib.md5(b"abcdefghij").hexdigest()

    def test_compute_checksum(self):
        assert compute_checksum(b"data", "sha1") == hashlib.sha1(b"data").hexdigest()

    def test_update_after_finalize_raises(self):
        calculator = IncrementalChecksumCalculator()
        calculator.finalize()

        with pytest.raises(ValueError):
            calculator.update(b"late")

    @pytest.mark.parametrize("algorithm", ["no-such-digest", "shake_128", None])
    def test_unavailable_algorithms(self, algorithm):
        with pytest.raises(DigestUnavailableError):
            IncrementalChecksumCalculator(algorithm)
