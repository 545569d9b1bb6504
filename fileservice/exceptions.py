"""Custom exception classes for the file service."""


class FileServiceError(Exception):
    """
    Base exception class for all file service errors.
    """
    pass


class UserAlreadyExistsError(FileServiceError):
    """
    Raised when attempting to register an email that already exists.
    """
    pass


class InvalidCredentialsError(FileServiceError):
    """
    Raised when login credentials are invalid.
    """
    pass


class InvalidAPIKeyError(FileServiceError):
    """
    Raised when an API Key is missing, malformed or unknown.
    """
    pass


class FileNotFoundError(FileServiceError):
    """
    Raised when a requested file record does not exist.
    """
    pass


class AccessForbiddenError(FileServiceError):
    """
    Raised when the caller is neither owner, nor a public or shared reader.
    """
    pass


class InvalidUploadError(FileServiceError):
    """
    Raised when an upload carries no content.
    """
    pass


class BlobNotFoundError(FileServiceError):
    """
    Raised when a blob is missing from its container.
    """
    pass


class InvalidSignatureError(FileServiceError):
    """
    Raised when a signed blob URL is tampered with or expired.
    """
    pass


class InvalidRequestError(FileServiceError):
    """
    Raised when a request is well-formed but carries no usable values.
    """
    pass
