import functools
import logging
from uuid import UUID

from printshop.domain.errors import DomainError, InternalError


def operation(name: str):
    """Log the attempt and any failure of a use case method.

    The wrapped method must take ``(self, actor, ...)``; the first UUID among
    the remaining positional arguments is logged as the target. Domain errors
    propagate unchanged, anything else is re-raised as InternalError.
    """
    def decorator(func):
        logger = logging.getLogger(func.__module__)

        @functools.wraps(func)
        def wrapper(self, actor, *args, **kwargs):
            actor_id = getattr(actor, "id", None)
            target = next((arg for arg in args if isinstance(arg, UUID)), None)
            logger.info("Attempting to %s (actor=%s, target=%s)", name, actor_id, target)
            try:
                return func(self, actor, *args, **kwargs)
            except DomainError as e:
                logger.warning("Failed to %s (actor=%s, target=%s): %s", name, actor_id, target, e)
                raise
            except Exception as e:
                logger.exception("Failed to %s (actor=%s, target=%s)", name, actor_id, target)
                raise InternalError(f"Failed to {name}") from e
        return wrapper
    return decorator
