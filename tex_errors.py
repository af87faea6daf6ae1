# tex_errors.py


class TexError(Exception):
    """Base class for every failure raised while reading a PKG or TEX stream."""

    def __init__(self, message, field=None):
        super().__init__(message)
        self.message = message
        self.field = field
        self.trail = []

    def located(self, where):
        """Record an enclosing location while the error propagates outward."""
        self.trail.insert(0, where)
        return self

    def __str__(self):
        text = f"{self.field}: {self.message}" if self.field else self.message
        if self.trail:
            return " of ".join(reversed(self.trail)) + ": " + text
        return text


class UnrecognizedEnumValueError(TexError, ValueError):
    def __init__(self, enum_name, value, field=None):
        super().__init__(f"unrecognized {enum_name} value {value}", field)
        self.enum_name = enum_name
        self.value = value


class UnsupportedVersionError(TexError):
    pass


class TruncatedStreamError(TexError, EOFError):
    def __init__(self, wanted, got, position, field=None):
        super().__init__(
            f"stream truncated at 0x{position:08X}: wanted {wanted} bytes, got {got}",
            field,
        )
        self.wanted = wanted
        self.got = got
        self.position = position


class DecompressionError(TexError):
    pass


class TexEncodingError(TexError, ValueError):
    pass


class PackageError(TexError):
    pass
