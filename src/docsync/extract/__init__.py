"""Method extraction: pattern-based by default, tree-sitter on request."""

from docsync.extract.patterns import Extractor, PatternExtractor, extract_file, read_source

EXTRACTORS = ("pattern", "tree-sitter")


def get_extractor(name: str = "pattern") -> Extractor:
    """Build an extractor by name."""
    if name == "pattern":
        return PatternExtractor()
    if name == "tree-sitter":
        from docsync.extract.treesitter import TreeSitterExtractor

        return TreeSitterExtractor()
    raise ValueError(f"Unknown extractor: {name}")


__all__ = [
    "EXTRACTORS",
    "Extractor",
    "PatternExtractor",
    "extract_file",
    "get_extractor",
    "read_source",
]
