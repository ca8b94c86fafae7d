class CavernError(Exception):
    """Base error for cavern combat exceptions."""


class MapParseError(CavernError, ValueError):
    """Raised when the input map contains an unknown glyph or is malformed."""


class InvariantViolation(CavernError, AssertionError):
    """Raised when grid occupancy and the unit registry disagree, or a rule is broken internally."""


class RoundLimitExceeded(CavernError):
    """Raised when combat runs past the configured round cap."""


class TuningExhausted(CavernError):
    """Raised when no elf attack power can win without an elf dying."""


class SettingsError(CavernError):
    """Raised when a settings file cannot be read or fails validation."""
