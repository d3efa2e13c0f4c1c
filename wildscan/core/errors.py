"""Domain-specific errors for wildscan."""


class WildscanError(Exception):
    """Base error for wildscan."""


class PatternParseError(WildscanError):
    """Raised when a textual pattern token is neither hex nor a wildcard."""


class AutomatonBuildError(WildscanError):
    """Raised when the multi-pattern automaton cannot be built from the anchor set."""


class SignatureLoadError(WildscanError):
    """Raised when reading signature set sources fails or a set id is unknown."""


class SignatureValidationError(WildscanError):
    """Raised when a signature set file does not conform to schema or semantics."""


class HaystackReadError(WildscanError):
    """Raised when the file to scan cannot be opened or mapped."""
