"""
Errors raised by starlite-blog services and the entity repository.

Input problems use Django's ``ValidationError``; everything the storage
layer rejects, or that cannot be found, uses the classes below.
"""


class BlogError(Exception):
    """Base class for starlite-blog errors."""

    status_code = 500

    def __init__(self, message, **context):
        super().__init__(message)
        self.message = message
        self.context = context


class NotFound(BlogError):
    """Requested entity does not exist."""

    status_code = 404


class Conflict(BlogError):
    """Write rejected by a uniqueness or integrity constraint."""

    status_code = 409


class InvalidReference(Conflict):
    """
    Association id points at no existing category or tag.

    Still a Conflict, since the database's foreign key rejected the write,
    so callers catching Conflict see it too. The client sent the bad id,
    hence 400 rather than 409.
    """

    status_code = 400
