"""Domain-specific exceptions for the upload pipeline."""


class UploadError(Exception):
    """Base class for upload-related errors."""


class UploadParseError(UploadError):
    """Raised when the multipart body cannot be parsed."""


class NoFileFieldError(UploadError):
    """Raised when the request carries no admissible file part."""


class MissingStorageConfigError(UploadError):
    """Raised when bucket or region is not configured."""


class NoValidFilesError(UploadError):
    """Raised when every file of a request was skipped or failed."""


class StorageWriteError(UploadError):
    """Raised by storage adapters when an object write fails."""
