from domain.constants import DEFAULT_CHUNK_SIZE


def _write_all(dest, buf) -> None:
    # Raw (unbuffered) streams may accept only part of a chunk per call.
    view = memoryview(buf)
    while view:
        n = dest.write(view)
        if n is None:
            # writer that does not report a count
            break
        view = view[n:]


def copy(src, dest, chunk_size: int = DEFAULT_CHUNK_SIZE) -> int:
    """Copy every remaining byte of ``src`` into ``dest``.

    Both streams are treated as blocking: reads stop at b"" (end of stream).
    Neither stream is closed here; the caller owns both. Returns the number
    of bytes copied.
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    copied = 0
    while True:
        buf = src.read(chunk_size)
        if not buf:
            break
        _write_all(dest, buf)
        copied += len(buf)
    return copied


def copy_file(src_path: str, dst_path: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> int:
    # Source is opened first: a missing source never creates or truncates dst.
    with open(src_path, "rb") as fsrc, open(dst_path, "wb") as fdst:
        return copy(fsrc, fdst, chunk_size=chunk_size)
