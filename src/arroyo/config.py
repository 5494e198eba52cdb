"""ContextVar-based lexer configuration for arroyo.

Configuration is read by every rule through get_lex_config(), so nested
tokenization picks up the same settings without threading them through each
call.

Thread Safety:
    ContextVars are per-thread (and per-asyncio-task) by design, so concurrent
    lex() calls with different settings never see each other's values.

Usage:
    from arroyo.config import LexConfig, lex_config_context

    with lex_config_context(LexConfig(strict=True)):
        tokens = lex(text)

"""

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, replace
from typing import Any, Iterator


@dataclass(frozen=True, slots=True)
class LexConfig:
    """Immutable lexer configuration.

    Attributes:
        strict: Raise ExtensionError on rule contract violations instead of
            degrading to a text token. Meant for tests and rule authors.
        max_nesting_depth: Deepest recursive block/inline descent allowed
            before the remaining input is emitted as text.
        table_max_colspan: Upper bound for colspan derived from repeated pipes.
        table_detect_footer: Move the last body row into the table footer when
            the body has more than one row.

    """

    strict: bool = False
    max_nesting_depth: int = 64
    table_max_colspan: int = 8
    table_detect_footer: bool = False

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "LexConfig":
        """Create LexConfig from a dictionary, ignoring unknown keys.

        Example:
            >>> LexConfig.from_dict({"strict": True, "theme": "dark"}).strict
            True

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        return cls(**filtered)


_DEFAULT_CONFIG: LexConfig = LexConfig()

_lex_config: ContextVar[LexConfig] = ContextVar(
    "lex_config",
    default=_DEFAULT_CONFIG,
)


def get_lex_config() -> LexConfig:
    """Get the active configuration for this thread/context."""
    return _lex_config.get()


def set_lex_config(config: LexConfig) -> None:
    """Set configuration for the current context only."""
    _lex_config.set(config)


def reset_lex_config() -> None:
    """Reset the current context to the default configuration."""
    _lex_config.set(_DEFAULT_CONFIG)


@contextmanager
def lex_config_context(config: LexConfig | None = None, **overrides: Any) -> Iterator[LexConfig]:
    """Temporarily replace the configuration.

    Either pass a full LexConfig, keyword overrides applied to the current
    configuration, or both (overrides win).

    Example:
        >>> with lex_config_context(strict=True) as cfg:
        ...     cfg.strict
        True

    Thread Safety:
        Only affects the current context, and restores the previous value
        even if the body raises.

    """
    previous = _lex_config.get()
    active = replace(config or previous, **overrides)
    _lex_config.set(active)
    try:
        yield active
    finally:
        _lex_config.set(previous)


__all__ = [
    "LexConfig",
    "get_lex_config",
    "set_lex_config",
    "reset_lex_config",
    "lex_config_context",
]
