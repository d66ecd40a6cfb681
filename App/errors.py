"""Error types raised by the PixelArt pipeline and playback driver."""


class PixelArtError(Exception):
    """Base class for all application errors."""


class FilterError(PixelArtError, ValueError):
    """Transform-time error, fatal to a single filter invocation only."""


class InvalidDimensionsError(FilterError):
    """Source or working buffer would have a non-positive dimension."""


class DegenerateContrastError(FilterError):
    """Contrast value that zeroes the contrast factor denominator."""


class SourceUnavailableError(PixelArtError):
    """Source media failed to decode or open."""


class SuggestionUnavailableError(PixelArtError):
    """AI style advisor failed or returned a malformed response."""


class EncodingUnsupportedError(PixelArtError):
    """No usable codec/container for video capture."""
