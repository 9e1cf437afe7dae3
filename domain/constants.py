DEFAULT_CHUNK_SIZE = 1024 * 1024

JOB_STATUS_COPIED = "COPIED"
JOB_STATUS_VERIFIED = "VERIFIED"
JOB_STATUS_FAILED = "FAILED"
JOB_STATUS_SKIPPED = "SKIPPED"

ERROR_POLICY_RETRY_THEN_SKIP = "RETRY_THEN_SKIP"
ERROR_POLICY_SKIP = "SKIP"
ERROR_POLICY_ABORT = "ABORT"

ERROR_POLICY = {ERROR_POLICY_RETRY_THEN_SKIP, ERROR_POLICY_SKIP, ERROR_POLICY_ABORT}

ERROR_CODE_COPY_FAIL = "COPY_FAIL"
ERROR_CODE_VERIFY_FAIL = "VERIFY_FAIL"
