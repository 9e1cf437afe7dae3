class DigestMismatchError(RuntimeError):
    """Destination digest differs from the expected one after a copy."""

    def __init__(self, path: str, expected: str, actual: str):
        super().__init__(f"BLAKE3 mismatch for {path}: expected {expected}, got {actual}")
        self.path = path
        self.expected = expected
        self.actual = actual


class ManifestError(ValueError):
    pass
