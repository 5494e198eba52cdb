"""Extension rules for the arroyo tokenizer pipeline.

Public API:
    Extension: A named block or inline rule
    Level: BLOCK or INLINE
    ExtensionRegistry: Immutable ordered rule list
    ExtensionRegistryBuilder: Mutable builder
    create_default_registry: Cached registry of built-in rules
    create_registry_with_defaults: Builder pre-loaded with built-in rules
"""

from arroyo.extensions.protocol import Extension, Level, Tokenizer
from arroyo.extensions.registry import (
    ExtensionRegistry,
    ExtensionRegistryBuilder,
    create_default_registry,
    create_registry_with_defaults,
    default_extensions,
)

__all__ = [
    "Extension",
    "Level",
    "Tokenizer",
    "ExtensionRegistry",
    "ExtensionRegistryBuilder",
    "create_default_registry",
    "create_registry_with_defaults",
    "default_extensions",
]
