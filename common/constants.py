"""Project-wide constants (e.g., default chunk size, bucket name, hash algorithm)."""

DEFAULT_CHUNK_SIZE_BYTES: int = 255 * 1024  # 255 KiB default chunk size

DEFAULT_BUCKET_NAME: str = "fs"

DEFAULT_HASH_ALGORITHM: str = "md5"

DEFAULT_DATABASE_PATH: str = "./data/gridstore.db"

FILES_COLLECTION_SUFFIX: str = "files"
CHUNKS_COLLECTION_SUFFIX: str = "chunks"
