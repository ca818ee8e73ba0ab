"""Application errors — each carries the HTTP status it maps to."""


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(AppError):
    status_code = 400


class UnsupportedMediaTypeError(InvalidInputError):
    status_code = 415


class PayloadTooLargeError(InvalidInputError):
    status_code = 413


class StorageProviderError(AppError):
    status_code = 500


class DataUriError(AppError):
    status_code = 500
