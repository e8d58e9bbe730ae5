from fastapi import status


class VideoServiceError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(VideoServiceError):
    """Missing or invalid client input."""

    status_code = status.HTTP_400_BAD_REQUEST


class UploadTooLargeError(ValidationError):
    status_code = 413


class StorageWriteError(VideoServiceError):
    """The object could not be written to, or published from, the bucket."""


class MetadataWriteError(VideoServiceError):
    """The record insert failed after the object was already stored."""


class QueryError(VideoServiceError):
    """A read against the metadata store failed."""
