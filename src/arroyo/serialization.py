"""Token serialization: JSON round-trip for arroyo token trees.

Converts tokens to/from JSON-compatible dicts for hosts that tokenize in
one process and render in another (a worker streaming model output to a
browser, for example).

Every dict carries a ``_type`` discriminator (the class name) and the
token's ``kind``; output is deterministic (sorted keys).

Example:
    from arroyo import lex
    from arroyo.serialization import to_json, from_json

    tokens = lex("# Hello **World**")
    assert from_json(to_json(tokens)) == tokens

Thread Safety:
    All functions are pure; safe to call from any thread.

"""

import json
from collections.abc import Sequence
from dataclasses import fields, is_dataclass
from typing import Any

from arroyo import tokens as t

_TOKEN_TYPES: dict[str, type] = {
    cls.__name__: cls
    for cls in (
        t.Text,
        t.Escape,
        t.Strong,
        t.Em,
        t.Del,
        t.Codespan,
        t.Br,
        t.Link,
        t.Image,
        t.InlineHtml,
        t.Citation,
        t.Math,
        t.FootnoteRef,
        t.Sub,
        t.Sup,
        t.Space,
        t.Paragraph,
        t.Heading,
        t.Code,
        t.Blockquote,
        t.Html,
        t.Hr,
        t.ListItem,
        t.List,
        t.TableCell,
        t.TableRow,
        t.Table,
        t.Align,
        t.Description,
        t.DescriptionList,
        t.Mdx,
        t.MathBlock,
        t.Alert,
        t.FootnoteDefinition,
        t.Custom,
    )
}


def to_dict(token: Any) -> dict[str, Any]:
    """Convert a token (or table row/cell) to a JSON-compatible dict.

    Args:
        token: Any arroyo token or nested payload record.

    Returns:
        Dict with ``_type``, ``kind`` (for tokens) and all fields.

    """
    result: dict[str, Any] = {"_type": type(token).__name__}
    kind = getattr(token, "kind", None)
    if kind is not None:
        result["kind"] = kind
    for f in fields(token):
        result[f.name] = _serialize_value(getattr(token, f.name))
    return result


def _serialize_value(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return to_dict(value)
    if isinstance(value, tuple):
        return [_serialize_value(item) for item in value]
    if isinstance(value, dict):
        return {key: _serialize_value(item) for key, item in value.items()}
    # Primitives: str, int, float, bool, None
    return value


def from_dict(data: dict[str, Any]) -> Any:
    """Reconstruct a token from a dict produced by to_dict().

    Raises:
        ValueError: If ``_type`` is missing or unknown.

    """
    type_name = data.get("_type")
    if type_name is None:
        msg = "Missing '_type' field in serialized token"
        raise ValueError(msg)

    token_cls = _TOKEN_TYPES.get(type_name)
    if token_cls is None:
        msg = f"Unknown token type: {type_name!r}"
        raise ValueError(msg)

    kwargs = {f.name: _deserialize_value(data[f.name]) for f in fields(token_cls) if f.name in data}
    return token_cls(**kwargs)


def _deserialize_value(value: Any) -> Any:
    if isinstance(value, dict):
        if "_type" in value:
            return from_dict(value)
        return {key: _deserialize_value(item) for key, item in value.items()}
    if isinstance(value, list):
        return tuple(_deserialize_value(item) for item in value)
    return value


def to_json(tokens: Sequence[Any], *, indent: int | None = None) -> str:
    """Serialize a token sequence to a JSON array string.

    Args:
        tokens: Tokens as returned by lex() or Lexer.block_tokens().
        indent: JSON indentation level (None for compact).

    """
    return json.dumps([to_dict(token) for token in tokens], sort_keys=True, indent=indent)


def from_json(data: str) -> list[Any]:
    """Deserialize a token list from a JSON string produced by to_json().

    Raises:
        ValueError: If the JSON is not an array of serialized tokens.

    """
    raw = json.loads(data)
    if not isinstance(raw, list):
        msg = f"Expected a JSON array, got {type(raw).__name__}"
        raise ValueError(msg)
    return [from_dict(item) for item in raw]
