"""Configuration settings for gridstore."""

import os
from common.constants import (
    DEFAULT_BUCKET_NAME,
    DEFAULT_CHUNK_SIZE_BYTES,
    DEFAULT_DATABASE_PATH,
    DEFAULT_HASH_ALGORITHM,
)


DATABASE_PATH = os.environ.get("GRIDSTORE_DATABASE_PATH", DEFAULT_DATABASE_PATH)

BUCKET_NAME = os.environ.get("GRIDSTORE_BUCKET_NAME", DEFAULT_BUCKET_NAME)

CHUNK_SIZE_BYTES = int(os.environ.get("GRIDSTORE_CHUNK_SIZE_BYTES", str(DEFAULT_CHUNK_SIZE_BYTES)))

HASH_ALGORITHM = os.environ.get("GRIDSTORE_HASH_ALGORITHM", DEFAULT_HASH_ALGORITHM)
