"""Extension registry: ordered, immutable rule lists.

Rules are tried in registration order, so the builder preserves insertion
order and the built registry exposes per-level tuples the lexer iterates.

Thread Safety:
ExtensionRegistry is immutable after creation. Safe to share.
Use ExtensionRegistryBuilder for mutable construction.

Example:
    >>> builder = create_registry_with_defaults()
    >>> builder.register(Extension("shout", Level.INLINE, shout))
    >>> registry = builder.build()
    >>> "shout" in registry
    True
"""

from __future__ import annotations

from collections.abc import Iterable
from functools import cache

from arroyo.errors import RegistryError
from arroyo.extensions.protocol import Extension, Level
from arroyo.utils.logger import get_logger

logger = get_logger(__name__)


class ExtensionRegistry:
    """Immutable ordered registry of extension rules.

    Thread Safety:
        Immutable after creation. Safe to share across threads.
    """

    __slots__ = ("_extensions", "_by_name", "_block", "_inline", "_inline_start_chars")

    def __init__(self, extensions: tuple[Extension, ...]) -> None:
        """Initialize registry from an ordered tuple.

        Use ExtensionRegistryBuilder to create instances.
        """
        self._extensions = extensions
        self._by_name = {ext.name: ext for ext in extensions}
        self._block = tuple(ext for ext in extensions if ext.level is Level.BLOCK)
        self._inline = tuple(ext for ext in extensions if ext.level is Level.INLINE)
        chars: set[str] = set()
        for ext in self._inline:
            if ext.start_chars:
                chars |= ext.start_chars
        self._inline_start_chars = frozenset(chars)

    def get(self, name: str) -> Extension | None:
        return self._by_name.get(name)

    @property
    def names(self) -> tuple[str, ...]:
        """Registered names in registration order."""
        return tuple(ext.name for ext in self._extensions)

    @property
    def extensions(self) -> tuple[Extension, ...]:
        return self._extensions

    @property
    def block(self) -> tuple[Extension, ...]:
        """Block-level rules in registration order."""
        return self._block

    @property
    def inline(self) -> tuple[Extension, ...]:
        """Inline-level rules in registration order."""
        return self._inline

    @property
    def inline_start_chars(self) -> frozenset[str]:
        """Union of inline ``start_chars``; plain text runs stop at these."""
        return self._inline_start_chars

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __len__(self) -> int:
        return len(self._extensions)

    def __iter__(self):
        return iter(self._extensions)

    def __repr__(self) -> str:
        return f"ExtensionRegistry({', '.join(self.names)})"


class ExtensionRegistryBuilder:
    """Mutable builder for ExtensionRegistry.

    Example:
        >>> registry = (
        ...     ExtensionRegistryBuilder()
        ...     .register(hr_extension)
        ...     .register(align_extension)
        ...     .build()
        ... )
    """

    __slots__ = ("_extensions", "_names")

    def __init__(self) -> None:
        self._extensions: list[Extension] = []
        self._names: set[str] = set()

    def register(self, extension: Extension) -> ExtensionRegistryBuilder:
        """Append an extension after everything registered so far.

        Returns:
            Self for chaining

        Raises:
            RegistryError: If the name is taken or the extension is malformed
        """
        if not isinstance(extension, Extension):
            msg = f"Expected Extension, got {type(extension).__name__}"
            raise RegistryError(msg)
        if not extension.name:
            raise RegistryError("Extension name must be non-empty")
        if not callable(extension.tokenizer):
            msg = f"Extension '{extension.name}' tokenizer is not callable"
            raise RegistryError(msg)
        if extension.name in self._names:
            msg = f"Extension '{extension.name}' already registered"
            raise RegistryError(msg)
        if extension.interrupts_paragraph and extension.level is not Level.BLOCK:
            msg = f"Extension '{extension.name}': only block rules can interrupt paragraphs"
            raise RegistryError(msg)
        if extension.interrupt_test is not None and not extension.interrupts_paragraph:
            msg = f"Extension '{extension.name}': interrupt_test needs interrupts_paragraph=True"
            raise RegistryError(msg)

        self._names.add(extension.name)
        self._extensions.append(extension)
        return self

    def register_all(self, extensions: Iterable[Extension]) -> ExtensionRegistryBuilder:
        for extension in extensions:
            self.register(extension)
        return self

    def build(self) -> ExtensionRegistry:
        """Build an immutable registry from the registered extensions."""
        registry = ExtensionRegistry(tuple(self._extensions))
        logger.debug("Built extension registry: %s", ", ".join(registry.names))
        return registry

    def __len__(self) -> int:
        return len(self._extensions)


def default_extensions() -> tuple[Extension, ...]:
    """Built-in rules in their default order."""
    from arroyo.extensions.builtins import (
        align,
        alert,
        br,
        citations,
        dl,
        footnotes,
        hr,
        lists,
        math,
        mdx,
        subsup,
        table,
    )

    return (
        hr.HR,
        table.TABLE,
        footnotes.FOOTNOTE_DEFINITION,
        footnotes.FOOTNOTE_REF,
        alert.ALERT,
        math.MATH_BLOCK,
        math.MATH_INLINE,
        subsup.SUB,
        subsup.SUP,
        lists.LIST,
        br.BR,
        dl.DESCRIPTION_LIST,
        align.ALIGN,
        citations.CITATIONS,
        mdx.MDX,
    )


@cache
def create_default_registry() -> ExtensionRegistry:
    """Get the default registry (cached singleton).

    Thread Safety:
        Returns a cached immutable registry. Safe for concurrent access.
    """
    return create_registry_with_defaults().build()


def create_registry_with_defaults() -> ExtensionRegistryBuilder:
    """Create a builder pre-populated with the built-in rules.

    Host extensions registered on the returned builder run after every
    built-in rule.
    """
    return ExtensionRegistryBuilder().register_all(default_extensions())
