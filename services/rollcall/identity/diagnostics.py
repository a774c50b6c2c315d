"""Optional diagnostics sink for the resolvers.

Resolvers log through an injected StructuredLogger. A structlog bound logger
(``rollcall.logging_config.get_logger``) satisfies the protocol; when no
logger is supplied, NULL_LOGGER discards everything.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class StructuredLogger(Protocol):
    def warning(self, event: str, **kw: Any) -> Any: ...

    def debug(self, event: str, **kw: Any) -> Any: ...


class NullLogger:
    """Discards all diagnostics."""

    def warning(self, event: str, **kw: Any) -> None:
        pass

    def debug(self, event: str, **kw: Any) -> None:
        pass


NULL_LOGGER = NullLogger()
