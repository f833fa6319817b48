class ConfigurationError(ValueError):
    """Raised when transform parameters are invalid or self-contradictory.

    Only raised while parameters are loaded or a transform object is built,
    never while individual records are processed.
    """
