"""
Content sanitizer.

Reduces an HTML document to a flat fragment that only keeps text and a small
set of inline tags. Structural wrappers (``div``, ``p``, ``a``, ``table`` ...)
are unwrapped: their children take their place and are examined in turn, so
nesting of any depth is flattened. Whitelisted tags are kept verbatim with
their whole subtree.

The rewrite runs over a ``NodeArena``: an index-addressed copy of the
parent/children structure. The parsed tree is only read; edits happen to the
arena's lists, and the result is rendered from the arena.
"""
import re
from collections import deque
from typing import Deque, FrozenSet, List, Optional

import structlog

from metaextractor.parser.html_parser import HTMLElement, HTMLParser, parse_html

# Set up structured logger
logger = structlog.get_logger()

WHITELIST_TAGS: FrozenSet[str] = frozenset({"strong", "em", "u", "img", "i"})

NOISE_TAGS: FrozenSet[str] = frozenset({"script", "style"})

DOCTYPE_MARKER = "<!DOCTYPE"

LINE_BREAK = "<br />"

_LINE_BREAK_RUN = re.compile(r"[\r\n]{2,}")


class NodeArena:
    """
    Index-addressed node store used to rewrite a document.

    ``nodes[i]`` is the parsed node, ``parents[i]`` the index of its current
    parent (None once detached) and ``children[i]`` the ordered indices of its
    current children. Index 0 is the document root.
    """

    ROOT = 0

    def __init__(self, root: HTMLElement):
        self.nodes: List[HTMLElement] = []
        self.parents: List[Optional[int]] = []
        self.children: List[List[int]] = []
        self._add(root, None)
        # The root keeps every child; comments and the like are left in place.
        self.children[self.ROOT] = [self._add(child, self.ROOT) for child in root.contents]

    def _add(self, node: HTMLElement, parent: Optional[int]) -> int:
        self.nodes.append(node)
        self.parents.append(parent)
        self.children.append([])
        return len(self.nodes) - 1

    def flatten(self, whitelist: FrozenSet[str] = WHITELIST_TAGS) -> None:
        """
        Unwrap every non-whitelisted element reachable from the root.

        Nodes are visited breadth-first. An unwrapped node's element and text
        children are spliced into its parent's child list at the node's
        position, queued for the same treatment, and the node is detached.
        """
        queue: Deque[int] = deque(
            index for index in self.children[self.ROOT]
            if self.nodes[index].is_element or self.nodes[index].is_text
        )

        while queue:
            index = queue.popleft()
            node = self.nodes[index]

            if node.is_text or node.name in whitelist:
                continue

            parent = self.parents[index]
            if parent is None:
                continue

            promoted = [self._add(child, parent) for child in node.children]
            siblings = self.children[parent]
            position = siblings.index(index)
            siblings[position:position + 1] = promoted
            self.parents[index] = None
            queue.extend(promoted)

    def render(self) -> str:
        """Serialize the root's current children."""
        return "".join(self.nodes[index].serialize() for index in self.children[self.ROOT])


def _is_noise(node: HTMLElement) -> bool:
    if node.name in NOISE_TAGS or node.is_doctype:
        return True
    return node.get_text().upper().startswith(DOCTYPE_MARKER)


def remove_noise(document: HTMLParser) -> None:
    """Drop scripts, styles and doctype declarations from the document."""
    for node in document.root.descendants():
        if _is_noise(node):
            node.remove()


def sanitize_content(html: Optional[str]) -> str:
    """
    Sanitize an HTML document down to whitelisted inline markup.

    Runs of two or more line-break characters in the result are replaced by
    a single ``<br />``.

    Args:
        html: HTML document or fragment (None and "" give "")

    Returns:
        str: Sanitized, trimmed HTML fragment
    """
    if not html:
        return ""

    document = parse_html(html)
    remove_noise(document)

    arena = NodeArena(document.root)
    arena.flatten()

    content = arena.render().strip()
    logger.debug("Sanitized content", input_length=len(html), output_length=len(content))

    return _LINE_BREAK_RUN.sub(LINE_BREAK, content)


def flatten_text(content: Optional[str]) -> str:
    """Plain text of an HTML fragment (markup dropped, entities decoded)."""
    return parse_html(content).get_text()
