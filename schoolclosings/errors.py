"""Error types raised by schoolclosings."""


class SchoolClosingsError(Exception):
    """Base class for all schoolclosings errors."""


class UpstreamFetchError(SchoolClosingsError):
    """A catalog layer or the closings feed could not be fetched or parsed."""

    def __init__(self, source: str, message: str):
        super().__init__(f"{source}: {message}")
        self.source = source


class ConfigurationError(SchoolClosingsError, ValueError):
    """Raised when configuration values are invalid."""


class VotechTableError(ConfigurationError):
    """Raised when the votech layer references a code missing from the code table."""

    def __init__(self, codes: list[str]):
        super().__init__(f"No votech table entry for: {', '.join(sorted(codes))}")
        self.codes = codes
