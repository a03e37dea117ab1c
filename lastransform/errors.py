class LasTransformError(Exception):
    pass


# Missing or unusable command line arguments
class ConfigError(LasTransformError):
    pass


class TransformFileError(LasTransformError):
    """Raised when the transformation matrix file cannot be used.

    ``kind`` is one of ``unreadable``, ``parse``, ``empty``, ``shape`` or ``affine``.
    """

    def __init__(self, path, kind, detail=""):
        self.path = str(path)
        self.kind = kind
        self.detail = detail
        message = f"{self.path}: invalid transformation file ({kind})"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class SourceOpenError(LasTransformError):
    pass


class SinkOpenError(LasTransformError):
    pass


# Failure while reading or writing points; never retried
class StreamIOError(LasTransformError):
    pass


class QuantizationError(StreamIOError):
    pass
