"""
Element lookup that descends into encapsulated sub-documents.

Statement pages are built from web components whose internals live in shadow
roots. A saved page carries them as declarative shadow roots: a
``<template shadowrootmode="open">`` placed as the first child of the host
element. A plain CSS query against the host does not see into them, so
every lookup here walks the tree of sub-documents explicitly.
"""

import logging
from collections.abc import Callable, Iterator

from cssselect import SelectorError
from lxml import etree
from lxml.cssselect import CSSSelector

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 10

NestedDocumentFn = Callable[[etree._Element], etree._Element | None]


def nested_document(element: etree._Element) -> etree._Element | None:
    """Return the shadow root template hosted by ``element``, if any."""
    for child in element:
        if not isinstance(child.tag, str) or child.tag.lower() != "template":
            continue
        if child.get("shadowrootmode") is not None or child.get("shadowroot") is not None:
            return child
    return None


def light_descendants(
    root: etree._Element,
    nested: NestedDocumentFn = nested_document,
) -> Iterator[etree._Element]:
    """
    Yield the descendants of ``root`` in document order, without entering
    any nested sub-document.
    """
    stack = [_light_children(root, nested)]
    while stack:
        try:
            element = next(stack[-1])
        except StopIteration:
            stack.pop()
            continue
        yield element
        stack.append(_light_children(element, nested))


def _light_children(
    element: etree._Element,
    nested: NestedDocumentFn,
) -> Iterator[etree._Element]:
    shadow = nested(element)
    for child in element:
        if isinstance(child.tag, str) and child is not shadow:
            yield child


def _compile(selector: str) -> CSSSelector | None:
    try:
        return CSSSelector(selector, translator="html")
    except SelectorError as e:
        logger.debug(f"Ignoring malformed selector '{selector}': {e}")
        return None


def _attribute_contains(element: etree._Element, needle: str) -> bool:
    return needle in (element.get("class") or "") or needle in (element.get("id") or "")


def _direct_matches(
    root: etree._Element,
    selector: str,
    compiled: CSSSelector | None,
    partial: bool,
    nested: NestedDocumentFn,
) -> Iterator[etree._Element]:
    matched: set[etree._Element] = set()
    if compiled is not None:
        try:
            matched = set(compiled(root))
        except etree.XPathError as e:
            logger.debug(f"Selector '{selector}' failed at {root.tag}: {e}")

    if not matched and not partial:
        return

    for element in light_descendants(root, nested):
        if element in matched or (partial and _attribute_contains(element, selector)):
            yield element


def _sub_documents(
    root: etree._Element,
    nested: NestedDocumentFn,
) -> list[etree._Element]:
    """Sub-documents reachable from ``root`` without crossing another boundary."""
    found = []
    own = nested(root)
    if own is not None:
        found.append(own)
    for element in light_descendants(root, nested):
        shadow = nested(element)
        if shadow is not None:
            found.append(shadow)
    return found


def _walk(
    root: etree._Element | None,
    selector: str,
    partial: bool,
    max_depth: int,
    nested: NestedDocumentFn,
) -> Iterator[etree._Element]:
    """Depth-first walk over the tree of sub-documents, yielding matches."""
    if root is None:
        return

    compiled = _compile(selector)
    pending = [(root, max_depth)]
    while pending:
        current, depth = pending.pop()
        if depth <= 0:
            continue

        yield from _direct_matches(current, selector, compiled, partial, nested)

        # Reversed so that the first sub-document is searched first
        for sub_document in reversed(_sub_documents(current, nested)):
            pending.append((sub_document, depth - 1))


def locate(
    root: etree._Element | None,
    selector: str,
    partial: bool = False,
    max_depth: int = DEFAULT_MAX_DEPTH,
    nested: NestedDocumentFn = nested_document,
) -> etree._Element | None:
    """
    Find the first element matching ``selector`` below ``root``.

    Args:
        root: Element or sub-document root to search from
        selector: CSS selector, or a class/id fragment when ``partial`` is set
        partial: Also match elements whose class or id contains ``selector``
        max_depth: How many levels of nested sub-documents may be entered
        nested: Returns the sub-document hosted by an element

    Returns:
        The matching element, or None when nothing matches
    """
    return next(_walk(root, selector, partial, max_depth, nested), None)


def locate_all(
    root: etree._Element | None,
    selector: str,
    partial: bool = False,
    max_depth: int = DEFAULT_MAX_DEPTH,
    nested: NestedDocumentFn = nested_document,
) -> list[etree._Element]:
    """Return every element matching ``selector`` across all sub-documents."""
    return list(_walk(root, selector, partial, max_depth, nested))
