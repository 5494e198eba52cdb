"""Concurrency tests.

The registry, renderer and repairer are shared freely between threads; the
lexer configuration is per thread.
"""

from concurrent.futures import ThreadPoolExecutor

from arroyo import (
    HtmlRenderer,
    Lexer,
    create_default_registry,
    lex,
    lex_config_context,
    repair_incomplete_markdown,
)

DOCUMENTS = [
    "# Title\n\nSome **bold** and *em*",
    "| a | b |\n|---|---|\n| 1 | 2 |",
    "1. one\n2. two\n   - nested",
    "> [!TIP]\n> Use $x^2$ here[^1]\n\n[^1]: note",
    "[center]\n<Card title=\"x\">\nHi\n</Card>\n[/center]",
    "Streaming **bold with [link](https://exa",
]


class TestConcurrentUse:
    """Shared objects under concurrent load."""

    def test_concurrent_lex(self) -> None:
        """Concurrent tokenizing matches sequential results."""
        expected = [lex(doc) for doc in DOCUMENTS]
        work = DOCUMENTS * 20

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(lex, work))

        assert results == expected * 20

    def test_concurrent_render(self) -> None:
        """One renderer instance serves many threads."""
        renderer = HtmlRenderer()
        token_lists = [Lexer().block_tokens(doc) for doc in DOCUMENTS]
        expected = [renderer.render(tokens) for tokens in token_lists]

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(renderer.render, token_lists * 20))

        assert results == expected * 20

    def test_concurrent_repair(self) -> None:
        """Repair is pure."""
        prefixes = [doc[:cut] for doc in DOCUMENTS for cut in range(len(doc))]
        expected = [repair_incomplete_markdown(prefix) for prefix in prefixes]

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(repair_incomplete_markdown, prefixes))

        assert results == expected

    def test_shared_registry(self) -> None:
        """Lexers in different threads share the default registry."""

        def registry_id(_: int) -> int:
            return id(Lexer().registry)

        with ThreadPoolExecutor(max_workers=4) as executor:
            ids = set(executor.map(registry_id, range(16)))

        assert ids == {id(create_default_registry())}

    def test_per_thread_config(self) -> None:
        """A setting made in one thread does not leak into another."""

        def capped_colspan(_: int) -> int:
            with lex_config_context(table_max_colspan=1):
                (table,) = lex("| a ||| b |\n|---|---|---|---|")
            return table.head[0].cells[0].colspan

        def default_colspan(_: int) -> int:
            (table,) = lex("| a ||| b |\n|---|---|---|---|")
            return table.head[0].cells[0].colspan

        with ThreadPoolExecutor(max_workers=8) as executor:
            capped = list(executor.map(capped_colspan, range(20)))
            uncapped = list(executor.map(default_colspan, range(20)))

        assert set(capped) == {1}
        assert set(uncapped) == {3}
