"""Error taxonomy for management operations."""


class DocstoreError(Exception):
    """Base exception for the docstore layer.

    Every error carries a ``type`` (the error class family) and a stable,
    machine-readable ``code`` so the RPC layer can surface it unmodified.
    """

    type = "internal"
    default_code = "internal-error"

    def __init__(self, hint: str | None = None, code: str | None = None, **context):
        self.hint = hint or self.__class__.__doc__ or ""
        self.code = code or self.default_code
        self.context = context
        super().__init__(self.hint)

    def to_dict(self) -> dict:
        data = {"type": self.type, "code": self.code, "hint": self.hint}
        if self.context:
            data["context"] = {k: str(v) for k, v in self.context.items()}
        return data


class AuthorizationError(DocstoreError):
    """Profile lacks the required capability on a container."""

    type = "authorization"
    default_code = "not-authorized"


class ValidationError(DocstoreError):
    """Request is well-formed but not allowed."""

    type = "validation"
    default_code = "invalid-params"


class NotFoundError(DocstoreError):
    """Object not found."""

    type = "not-found"
    default_code = "object-not-found"


class StorageError(DocstoreError):
    """Underlying transaction failed."""

    type = "internal"
    default_code = "storage-error"


def raise_validation(code: str, hint: str, **context):
    raise ValidationError(hint=hint, code=code, **context)
