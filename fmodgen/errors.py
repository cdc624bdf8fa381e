class FmodGenError(Exception):
    """Base class for every failure raised by the generator pipeline."""


class HeaderMalformed(FmodGenError):
    """The top-level declaration list of a header could not be located."""

    def __init__(self, dialect: str, reason: str):
        self.dialect = dialect
        self.reason = reason
        super().__init__(f"{dialect}: {reason}")


class HeaderSyntaxError(FmodGenError):
    """A header contains a declaration shape its grammar does not recognise."""

    def __init__(self, dialect: str, line: int | None, column: int | None, detail: str):
        self.dialect = dialect
        self.line = line
        self.column = column
        self.detail = detail
        location = f"{line}:{column}" if line is not None else "?"
        super().__init__(f"{dialect} at {location}: {detail}")


class NumericConversionError(FmodGenError, ValueError):
    def __init__(self, text: str, expected: str):
        self.text = text
        self.expected = expected
        super().__init__(f"cannot convert {text!r} to {expected}")


class UnimplementedShape(FmodGenError, NotImplementedError):
    """The generator met an input shape it has no rule for and refuses to guess."""
