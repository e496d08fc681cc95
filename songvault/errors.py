class IngestError(Exception):
    """Base class of every failure reported back to a song submitter."""
    status = 500

    @property
    def message(self):
        return self.args[0] if self.args else self.__class__.__name__

    def json(self):
        return dict(success=False, message=self.message)


class ConfigurationError(IngestError):
    """Database or storage backend is unavailable; nothing is attempted."""


class ValidationError(IngestError):
    status = 400

    def __init__(self, errors):
        super().__init__("; ".join(errors))
        self.errors = list(errors)

    def json(self):
        return dict(success=False, errors=self.errors)


class ResolutionError(IngestError):
    """An author entry could not be turned into rows, e.g. a new author without a name."""


class PersistenceError(IngestError):
    def __init__(self, message="Database error"):
        super().__init__(message)
