"""
Contextvars-based settings for member resolution.

The process-wide default can be replaced with set_default_accessor_settings();
accessor_context() scopes overrides to a block:

    with accessor_context(mangle_private_names=False):
        get_field_value(obj, "__raw")   # looked up literally
"""

import contextvars
import dataclasses
import logging
from contextlib import contextmanager
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccessorSettings:
    """Knobs for the type chain walk.

    mangle_private_names: look up ``__name`` as ``_Class__name`` at each class
    search_instance_namespace: treat entries of ``vars(target)`` as fields
    include_static: match class-level members (classproperty, class fields)
    """
    mangle_private_names: bool = True
    search_instance_namespace: bool = True
    include_static: bool = True


_default_settings = AccessorSettings()

# None means "use the process default"
current_accessor_settings: contextvars.ContextVar = contextvars.ContextVar(
    'current_accessor_settings', default=None
)


def get_accessor_settings() -> AccessorSettings:
    """Return the settings active in the current context."""
    settings = current_accessor_settings.get()
    return settings if settings is not None else _default_settings


def set_default_accessor_settings(settings: AccessorSettings) -> None:
    """Replace the process-wide default settings."""
    global _default_settings
    if not isinstance(settings, AccessorSettings):
        raise TypeError(f"Expected AccessorSettings, got {type(settings).__name__}")
    _default_settings = settings
    logger.debug(f"Default accessor settings set to {settings}")


def reset_accessor_settings() -> None:
    """Restore the built-in defaults. Mainly for tests."""
    set_default_accessor_settings(AccessorSettings())


@contextmanager
def accessor_context(**overrides):
    """
    Scope setting overrides to a ``with`` block.

    Nested contexts build on the enclosing one. Unknown setting names raise
    TypeError (from dataclasses.replace) before the context is entered.
    """
    settings = dataclasses.replace(get_accessor_settings(), **overrides)
    token = current_accessor_settings.set(settings)
    try:
        yield settings
    finally:
        current_accessor_settings.reset(token)
