"""Built-in extension rules.

Each module exposes module-level Extension constants; default_extensions()
in arroyo.extensions.registry puts them in their default order.
"""
