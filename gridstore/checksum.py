"""Provides content hash calculation helpers for uploaded objects."""

import hashlib

from gridstore.config import HASH_ALGORITHM
from gridstore.exceptions import DigestUnavailableError


def compute_checksum(data: bytes, algorithm: str = HASH_ALGORITHM) -> str:
    """
    Compute the hex digest of data in one pass.

    Args:
        data: Bytes to compute checksum for
        algorithm: hashlib algorithm name

    Returns:
        Hexadecimal string representation of the digest
    """
    calculator = IncrementalChecksumCalculator(algorithm)
    calculator.update(data)
    return calculator.finalize()


class IncrementalChecksumCalculator:
    """
    Calculate a content hash incrementally for streaming data.

    Usage:
        calculator = IncrementalChecksumCalculator("md5")
        calculator.update(chunk1)
        calculator.update(chunk2)
        final_checksum = calculator.finalize()
    """

    def __init__(self, algorithm: str = HASH_ALGORITHM):
        """
        Args:
            algorithm: hashlib algorithm name

        Raises:
            DigestUnavailableError: If the algorithm cannot be instantiated
        """
        self.algorithm = algorithm
        self._hasher = self._new_hasher(algorithm)
        self._finalized = False

    @staticmethod
    def _new_hasher(algorithm: str):
        try:
            if algorithm.lower() == "md5":
                # Digest is for integrity checks only.
                hasher = hashlib.md5(usedforsecurity=False)
            else:
                hasher = hashlib.new(algorithm)
        except (ValueError, TypeError, AttributeError) as e:
            raise DigestUnavailableError(
                f"No {algorithm} message digest available, cannot upload file"
            ) from e

        # Variable-length digests (shake_*) have no fixed hexdigest.
        if hasher.digest_size == 0:
            raise DigestUnavailableError(
                f"Digest {algorithm} has no fixed length, cannot upload file"
            )
        return hasher

    def update(self, data: bytes) -> None:
        """
        Update checksum with new data.

        Args:
            data: Bytes to add to checksum calculation
        """
        if self._finalized:
            raise ValueError("Cannot update after finalization")
        self._hasher.update(data)

    def finalize(self) -> str:
        """
        Finalize checksum calculation and return result.

        Returns:
            Hexadecimal string representation of the digest
        """
        self._finalized = True
        return self._hasher.hexdigest()
