from datetime import datetime

def now_iso() -> str:
    return datetime.now().replace(microsecond=0).isoformat()
