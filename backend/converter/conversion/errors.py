"""Conversion errors. Each carries the HTTP status the API answers with."""


class ConversionError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingInput(ConversionError):
    status_code = 400


class UnsupportedFormat(ConversionError):
    status_code = 400

    def __init__(self, target_format: str):
        super().__init__(f"Unsupported target format: {target_format}")
        self.target_format = target_format


class UnsupportedConversion(ConversionError):
    status_code = 400


class UploadTooLarge(ConversionError):
    status_code = 413


class EncodeFailure(ConversionError):
    status_code = 500

    def __init__(self, target_format: str, detail: str = ""):
        message = f"Server error converting to {target_format}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.target_format = target_format


class IcoGenerationFailed(ConversionError):
    status_code = 500

    def __init__(self, message: str = "Failed to generate any .ico files for the ZIP."):
        super().__init__(message)
