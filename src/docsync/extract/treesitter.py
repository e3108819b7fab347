"""Tree-sitter PHP extractor: brace-aware alternative to the pattern extractor."""

from __future__ import annotations

import logging

import tree_sitter_php as ts_php
from tree_sitter import Language, Node, Parser, Query, QueryCursor

from docsync.models import Method, Visibility

logger = logging.getLogger(__name__)

PHP_LANGUAGE = Language(ts_php.language_php())

# Only definitions with a body are captured; abstract and interface
# declarations end in ';' and have no compound_statement.
_METHOD_QUERY_SRC = """
(method_declaration
  name: (_) @name
  parameters: (formal_parameters) @params
  body: (compound_statement) @body) @definition

(function_definition
  name: (_) @name
  parameters: (formal_parameters) @params
  body: (compound_statement) @body) @definition
"""


def _text(node: Node) -> str:
    return node.text.decode("utf-8", errors="replace")


def _visibility(def_node: Node) -> Visibility:
    for child in def_node.children:
        if child.type == "visibility_modifier":
            return Visibility(_text(child).lower())
    return Visibility.PUBLIC


class TreeSitterExtractor:
    name = "tree-sitter"

    def __init__(self) -> None:
        self._parser = Parser(PHP_LANGUAGE)
        self._query = Query(PHP_LANGUAGE, _METHOD_QUERY_SRC)

    def extract(self, source: str) -> list[Method]:
        data = source.encode("utf-8")
        tree = self._parser.parse(data)

        def char_offset(byte_offset: int) -> int:
            return len(data[:byte_offset].decode("utf-8", errors="replace"))

        cursor = QueryCursor(self._query)
        matches = cursor.matches(tree.root_node)

        methods: list[Method] = []
        for _pattern_idx, captures in matches:
            def_nodes = captures.get("definition", [])
            name_nodes = captures.get("name", [])
            params_nodes = captures.get("params", [])
            body_nodes = captures.get("body", [])
            if not (def_nodes and name_nodes and params_nodes and body_nodes):
                continue

            def_node = def_nodes[0]
            start_byte = def_node.start_byte
            docblock = None

            # A /** */ comment separated from the definition only by whitespace
            prev = def_node.prev_named_sibling
            if prev is not None and prev.type == "comment":
                between = data[prev.end_byte:def_node.start_byte]
                comment = _text(prev)
                if comment.startswith("/**") and not between.strip():
                    docblock = comment + between.decode("utf-8")
                    start_byte = prev.start_byte

            methods.append(
                Method(
                    visibility=_visibility(def_node),
                    name=_text(name_nodes[0]),
                    parameters=_text(params_nodes[0])[1:-1],
                    body=_text(body_nodes[0])[1:-1].strip(),
                    start_position=char_offset(start_byte),
                    end_position=char_offset(def_node.end_byte),
                    docblock=docblock,
                )
            )

        methods.sort(key=lambda m: m.start_position)
        logger.debug("Tree-sitter extractor found %d method(s)", len(methods))
        return methods
