"""Error types raised across pipeline stages."""


class EmbeddingUnavailable(RuntimeError):
    """The embedding backend could not be loaded or failed to encode."""


class GenerationFailed(RuntimeError):
    """A guided-generation call errored or returned unusable output."""


class GenerationTimeout(GenerationFailed):
    """A guided-generation call did not answer within its timeout."""


class InvalidThreshold(ValueError):
    """Similarity threshold outside (0, 1]."""
