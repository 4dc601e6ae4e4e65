"""Configuration errors raised before any test executes."""


class LiteError(Exception):
    """Raised when a run cannot start because of invalid configuration."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @classmethod
    def invalid_substitution(cls, name: str) -> "LiteError":
        return cls(f"invalid substitution: {name}")

    @classmethod
    def could_not_open_test_dir(cls, path: str) -> "LiteError":
        """The test directory could not be found on the file system."""
        return cls(f"could not open test directory at '{path}'")

    @classmethod
    def test_dir_is_not_directory(cls, path: str) -> "LiteError":
        """The test directory exists but is not a directory."""
        return cls(f"'{path}' is not a directory")

    @classmethod
    def invalid_filter(cls, pattern: str) -> "LiteError":
        return cls(f"invalid filter: {pattern}")
