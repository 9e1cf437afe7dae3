# eservice_io/hash_stream.py
# BLAKE3 digests used to verify copies

from blake3 import blake3


def blake3_stream(stream, chunk_bytes: int = 4 * 1024 * 1024) -> str:
    h = blake3()
    for chunk in iter(lambda: stream.read(chunk_bytes), b""):
        h.update(chunk)
    return h.hexdigest()


def blake3_file(path: str, chunk_bytes: int = 4 * 1024 * 1024) -> str:
    with open(path, "rb") as f:
        return blake3_stream(f, chunk_bytes=chunk_bytes)
