from eservice_io.path_utils import ensure_parent
from utils.timeutil import now_iso

class RunLogger:
    def __init__(self, path: str):
        self.path = path
        ensure_parent(path)

    def log(self, msg: str):
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(f"{now_iso()} {msg}\n")
