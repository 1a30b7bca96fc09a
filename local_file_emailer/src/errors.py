from typing import Optional


class EmailerError(Exception):
    code = "emailer_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigError(EmailerError):
    code = "bad_config"


class EmailFileError(EmailerError):
    code = "email_file_unreadable"

    def __init__(self, path: str, reason: str):
        super().__init__(f"Cannot read email file {path}: {reason}")
        self.path = path


class MalformedLineError(EmailerError):
    code = "malformed_line"

    def __init__(self, line_number: int, line: str):
        super().__init__(f"Malformed field on line {line_number}: {line!r} (expected 'Key: value')")
        self.line_number = line_number
        self.line = line


class InvalidAddressError(EmailerError, ValueError):
    code = "invalid_address"

    def __init__(self, field_name: str, address: Optional[str]):
        shown = address if address else "(missing)"
        super().__init__(f"Invalid email address in {field_name}: {shown!r}")
        self.field = field_name
        self.address = address


class AttachmentError(EmailerError):
    code = "attachment_unreadable"

    def __init__(self, path: str, reason: str):
        super().__init__(f"Cannot attach {path}: {reason}")
        self.path = path


class TransportError(EmailerError):
    code = "transport_failed"


class AuthenticationError(TransportError):
    code = "authentication_failed"
