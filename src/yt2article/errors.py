"""Custom exceptions for yt2article."""


class Yt2ArticleError(Exception):
    """Base exception for yt2article."""

    pass


class ParseError(Yt2ArticleError):
    """Caption markup could not be parsed."""

    pass


class ConfigError(Yt2ArticleError):
    """Invalid configuration or token budget."""

    pass


class GenerationError(Yt2ArticleError):
    """Article generation failed."""

    def __init__(self, message: str, chunk_index: int | None = None):
        super().__init__(message)
        self.chunk_index = chunk_index


class NotFoundError(Yt2ArticleError):
    """No captions are available for the video."""

    pass


class InputError(Yt2ArticleError):
    """Missing or malformed request input."""

    pass
