"""All magic values live here — no inline literals anywhere else."""

# Hosted service
HOSTED_ENDPOINT = "https://api.moondream.ai/v1"
DEFAULT_TIMEOUT_SECONDS: float = 5.0

# Endpoint paths
PATH_POINT = "/point"
PATH_DETECT = "/detect"
PATH_CAPTION = "/caption"
PATH_QUERY = "/query"

# Request body fields
FIELD_IMAGE = "image"
FIELD_OBJECT = "object"
FIELD_LENGTH = "length"
FIELD_QUESTION = "question"

# Headers
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_ACCEPT = "Accept"
HEADER_AUTHORIZATION = "Authorization"
CONTENT_TYPE_JSON = "application/json"
BEARER_PREFIX = "Bearer "

# Environment variables
ENV_ENDPOINT = "MOONDREAM_ENDPOINT"
ENV_API_KEY = "MOONDREAM_API_KEY"
ENV_TIMEOUT = "MOONDREAM_TIMEOUT"
ENV_LOG_LEVEL = "LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"

# Validation messages
MSG_EMPTY_IMAGE = "image payload must not be empty"
MSG_EMPTY_OBJECT = "object label must not be empty"
MSG_EMPTY_QUESTION = "question must not be empty"
MSG_BAD_LENGTH = "caption length must be one of: %s"
MSG_EMPTY_ENDPOINT = "endpoint must not be empty"
MSG_BAD_ENDPOINT = "endpoint must start with http:// or https://: %s"
MSG_EMPTY_TOKEN = "token must not be empty in remote mode"
MSG_BAD_TIMEOUT = "timeout must be a positive number of seconds"
MSG_MISSING_API_KEY = "MOONDREAM_API_KEY must be set in .env (or MOONDREAM_ENDPOINT for a local server)"
MSG_BAD_ENV_TIMEOUT = "MOONDREAM_TIMEOUT must be a number: %s"

# Error messages
MSG_NETWORK_FAILED = "request to %s failed: %s"
MSG_NETWORK_TIMEOUT = "request to %s timed out after %ss"
MSG_STATUS_ERROR = "HTTP %d"
MSG_NOT_JSON = "response body is not valid JSON"
MSG_BAD_SHAPE = "response body does not match %s: %s"

# Diagnostics
MSG_SENDING = "POST %s"
MSG_RECEIVED = "POST %s → %d (%.1fms)"
MSG_ALREADY_ENTERED = "client is already open in an async with block; close it before entering again"

# CLI
CLI_PROG = "moondream"
MSG_CLI_STARTING = "Running %s on %s"
MSG_CLI_FAILED = "✗ %s"
