import os

def norm_abs_path(p: str) -> str:
    return os.path.abspath(os.path.normpath(p))

def ensure_parent(path: str) -> None:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
