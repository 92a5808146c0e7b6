class ComponentMetaError(Exception):
    pass


class SourceParseError(ComponentMetaError):
    """The source could not be turned into a clean syntax tree."""

    def __init__(self, message: str, line: int = 0, column: int = 0):
        super().__init__(message)
        self.line = line
        self.column = column

    def __str__(self):
        if self.line:
            return f"{self.args[0]} (line {self.line}, column {self.column})"
        return self.args[0]


class UnsupportedDialectError(ComponentMetaError, ValueError):
    pass


class ConfigError(ComponentMetaError):
    pass
