"""Exceptions raised by the stage explorer."""


class ExplorationError(Exception):
    """Base class for explorer errors."""


class JourneyNotStartedError(ExplorationError):
    """next() was called before start()."""


class ResponseParseError(ExplorationError, ValueError):
    """A structured response from the generative service could not be parsed."""
