from dataclasses import dataclass
from typing import Optional

from domain.constants import DEFAULT_CHUNK_SIZE, ERROR_POLICY_RETRY_THEN_SKIP


@dataclass(frozen=True)
class CopyJob:
    job_id: str
    source_path: str
    dest_path: str
    expected_digest: Optional[str] = None  # hex BLAKE3 of the source, if known


@dataclass
class CopyResult:
    job_id: str
    source_path: str
    dest_path: str
    status: str
    bytes_copied: int = 0
    attempts: int = 0
    digest: Optional[str] = None
    error_code: Optional[str] = None
    error_message: Optional[str] = None


@dataclass(frozen=True)
class ExecutorConfig:
    chunk_size: int = DEFAULT_CHUNK_SIZE
    error_policy: str = ERROR_POLICY_RETRY_THEN_SKIP
    retries: int = 2
    verify: bool = False
    make_parents: bool = True
    copy_stat: bool = False  # also copy mode bits and timestamps
