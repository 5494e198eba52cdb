"""arroyo renderers.

Renderers turn token trees into output formats.

Available Renderers:
- HtmlRenderer: Renders tokens to HTML using StringBuilder pattern

Thread Safety:
All renderers use StringBuilder local to each render() call.
Safe for concurrent use from multiple threads.

"""

from arroyo.renderers.html import HtmlRenderer
from arroyo.renderers.protocol import TokenRenderer

__all__ = ["HtmlRenderer", "TokenRenderer"]
