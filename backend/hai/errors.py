"""
Hai Backend - Error Types

Purpose: Error taxonomy shared by the store adapter, the repositories and the
HTTP layer.

    HaiError
    ├── NotFoundError          -> 404
    ├── ValidationError        -> 400
    ├── ConflictError          -> 409
    └── StoreError             -> 500
        ├── StoreUnavailable   (retryable)
        └── StoreRejected
            └── ConditionFailed
"""

from botocore.exceptions import BotoCoreError, ClientError


# Error codes DynamoDB returns for throttling and transient service failures
RETRYABLE_ERROR_CODES = frozenset({
    "ProvisionedThroughputExceededException",
    "ThrottlingException",
    "RequestLimitExceeded",
    "InternalServerError",
    "ServiceUnavailable",
    "TransactionInProgressException",
})


class HaiError(Exception):
    """Base class for all application errors"""


class NotFoundError(HaiError):
    """Point lookup or update target does not exist"""


class ValidationError(HaiError, ValueError):
    """Missing required field or malformed value"""


class ConflictError(HaiError):
    """Write rejected because it conflicts with the stored state"""


class StoreError(HaiError):
    """Failure surfaced from the key-value store"""

    retryable = False

    def __init__(self, message: str, code: str = ""):
        super().__init__(message)
        self.code = code


class StoreUnavailable(StoreError):
    """Network, throttling or service failure; safe to retry"""

    retryable = True


class StoreRejected(StoreError):
    """Request rejected by the store (malformed expression, unknown index, ...)"""


class ConditionFailed(StoreRejected):
    """Conditional write did not match the stored item"""


def translate_store_error(error: Exception) -> StoreError:
    """Map a botocore failure onto the store error taxonomy"""
    if isinstance(error, ClientError):
        code = error.response.get("Error", {}).get("Code", "")
        message = error.response.get("Error", {}).get("Message", str(error))

        if code == "ConditionalCheckFailedException":
            return ConditionFailed(message, code)
        if code in RETRYABLE_ERROR_CODES:
            return StoreUnavailable(message, code)
        status = error.response.get("ResponseMetadata", {}).get("HTTPStatusCode", 0)
        if status >= 500:
            return StoreUnavailable(message, code)
        return StoreRejected(message, code)

    if isinstance(error, BotoCoreError):
        # Endpoint/connection/read-timeout failures never reached the table
        return StoreUnavailable(str(error), type(error).__name__)

    return StoreRejected(str(error))
