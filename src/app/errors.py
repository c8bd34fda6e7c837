class AppError(Exception):
    """Base application error"""


class ConfigError(AppError):
    """Missing or invalid configuration"""


class InvalidRequestError(AppError):
    """Required request fields are missing or empty"""


class SessionNotFoundError(AppError):
    """Session ID not found in the store"""


class StorageError(AppError):
    """Reading or writing the session store failed"""


class UpstreamError(AppError):
    """The response generator failed or timed out"""
