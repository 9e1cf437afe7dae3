import shutil

from domain.constants import (
    ERROR_POLICY,
    ERROR_POLICY_ABORT,
    ERROR_POLICY_RETRY_THEN_SKIP,
    ERROR_CODE_COPY_FAIL,
    ERROR_CODE_VERIFY_FAIL,
    JOB_STATUS_COPIED,
    JOB_STATUS_FAILED,
    JOB_STATUS_SKIPPED,
    JOB_STATUS_VERIFIED,
)
from domain.errors import DigestMismatchError
from domain.models import CopyJob, CopyResult, ExecutorConfig
from eservice_io.hash_stream import blake3_file
from eservice_io.path_utils import ensure_parent
from eservice_io.stream_copy import copy_file


class ExecutorService:
    def __init__(self, config: ExecutorConfig | None = None, logger=None):
        self.config = config or ExecutorConfig()
        if self.config.error_policy not in ERROR_POLICY:
            raise ValueError(f"Unknown error policy: {self.config.error_policy}")
        if self.config.retries < 0:
            raise ValueError(f"retries must be >= 0, got {self.config.retries}")
        self.logger = logger

    def _log(self, msg: str):
        if self.logger:
            self.logger.log(msg)

    def _copy_one(self, job: CopyJob) -> tuple[int, str | None]:
        cfg = self.config
        if cfg.make_parents:
            ensure_parent(job.dest_path)

        bytes_copied = copy_file(job.source_path, job.dest_path, chunk_size=cfg.chunk_size)
        if cfg.copy_stat:
            shutil.copystat(job.source_path, job.dest_path, follow_symlinks=False)

        if not (cfg.verify or job.expected_digest):
            return bytes_copied, None

        expected = job.expected_digest or blake3_file(job.source_path)
        actual = blake3_file(job.dest_path)
        if actual != expected:
            raise DigestMismatchError(job.dest_path, expected, actual)
        return bytes_copied, actual

    def execute(self, jobs: list[CopyJob], progress_cb=None, stop_flag=None) -> list[CopyResult]:
        """Run copy jobs one after another.

        Failed jobs are recorded as FAILED results unless the error policy is
        ABORT, in which case the error propagates. Once ``stop_flag()`` returns
        true the remaining jobs are returned as SKIPPED.
        """
        cfg = self.config
        total = len(jobs)
        results: list[CopyResult] = []
        done = 0
        stopped = False

        for job in jobs:
            if not stopped and stop_flag and stop_flag():
                self._log("Stop requested; skipping remaining jobs")
                stopped = True
            if stopped:
                results.append(CopyResult(job.job_id, job.source_path, job.dest_path, JOB_STATUS_SKIPPED))
                continue

            src = job.source_path
            dst = job.dest_path
            self._log(f"COPY {job.job_id}: {src} -> {dst}")

            attempt = 0
            while True:
                attempt += 1
                try:
                    bytes_copied, digest = self._copy_one(job)
                    status = JOB_STATUS_VERIFIED if digest else JOB_STATUS_COPIED
                    results.append(CopyResult(
                        job.job_id, src, dst, status,
                        bytes_copied=bytes_copied, attempts=attempt, digest=digest,
                    ))
                    self._log(f"{status} {job.job_id}: {bytes_copied} bytes")
                    break
                except (OSError, DigestMismatchError) as e:
                    code = ERROR_CODE_VERIFY_FAIL if isinstance(e, DigestMismatchError) else ERROR_CODE_COPY_FAIL
                    msg = f"{type(e).__name__}: {e}"
                    self._log(f"{code} {job.job_id} (attempt {attempt}): {msg}")

                    if cfg.error_policy == ERROR_POLICY_ABORT:
                        raise
                    if cfg.error_policy == ERROR_POLICY_RETRY_THEN_SKIP and attempt <= cfg.retries:
                        continue

                    results.append(CopyResult(
                        job.job_id, src, dst, JOB_STATUS_FAILED,
                        attempts=attempt, error_code=code, error_message=msg,
                    ))
                    break

            done += 1
            if progress_cb:
                progress_cb(done, total, src, dst)

        return results
