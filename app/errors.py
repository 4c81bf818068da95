"""
Domain exceptions raised by the service and repository layers.

They carry no HTTP knowledge; ``app.responses.register_exception_handlers``
maps each one to a status code and an error envelope.
"""


class ArticleNotFoundError(Exception):
    def __init__(self, article_id: str) -> None:
        super().__init__(f"Article {article_id!r} not found")
        self.article_id = article_id


class ArticleValidationError(Exception):
    """A payload passed schema validation but is not acceptable (e.g. nulling a required field)."""


class BackendError(Exception):
    """
    The database failed or did not answer in time.

    The message is for logs only; clients get a generic error.
    """
