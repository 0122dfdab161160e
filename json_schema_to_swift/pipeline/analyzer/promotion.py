"""
Promotion of duplicated nested enumerations.

Identical value enumerations declared in several places (typically the
same enum-typed property in several records) are hoisted to a single
top-level declaration. Two declarations are identical when they emit
identical text.
"""

from __future__ import annotations

from ...logging import get_logger
from ..ast_backends.emitter import code_value
from .ir_nodes import (
    Alias,
    CodeType,
    DiscriminatedUnion,
    ExternalType,
    Function,
    NamedType,
    Record,
    SimpleEnum,
)
from .name_resolver import unique_name

logger = get_logger("promotion")


def _occurrences(types: list[NamedType], owner: list[NamedType] | None = None):
    """Yield ``(owning list, declaration)`` depth first through nested and peer edges.

    The owning list of a top-level declaration is None.
    """
    for declaration in list(types):
        yield owner, declaration
        for children in declaration.child_lists():
            yield from _occurrences(children, children)


def promote_types(
    types: list[NamedType],
    excluded_names: set[str] | None = None,
    reserved_names: set[str] | None = None,
) -> list[NamedType]:
    """
    Hoist duplicated nested SimpleEnums to the top level.

    Every group of two or more structurally identical enumerations keeps
    one top-level copy (an existing top-level member of the group, or
    else the first nested occurrence, suffixed when its name is already
    taken at the top level). The nested occurrences are removed from
    their owners and every reference to a group member is rewritten to
    the kept copy. Runs once; enumerations have no nested
    enumerations of their own to promote.

    Args:
        types: Top-level declarations; nested declarations are mutated in place
        excluded_names: Names that are never promoted
        reserved_names: Top-level names taken by declarations not in ``types``

    Returns:
        The top-level declarations, with promoted copies appended
    """
    excluded = {"CodingKeys"} | (excluded_names or set())

    groups: dict[str, list[tuple[list[NamedType] | None, SimpleEnum]]] = {}
    for owner, declaration in _occurrences(types):
        if not isinstance(declaration, SimpleEnum) or declaration.name in excluded:
            continue
        groups.setdefault(code_value(declaration), []).append((owner, declaration))

    result = list(types)
    taken = {t.name for t in types} | (reserved_names or set())
    replacements: dict[int, NamedType] = {}
    for occurrences in groups.values():
        if len(occurrences) < 2:
            continue
        top_level = [d for owner, d in occurrences if owner is None]
        promoted = top_level[0] if top_level else occurrences[0][1]
        logger.debug("Promoting %d occurrences of %s", len(occurrences), promoted.name)

        for owner, declaration in occurrences:
            if owner is not None:
                owner[:] = [t for t in owner if t is not declaration]
            if declaration is not promoted:
                replacements[id(declaration)] = promoted
        if not top_level:
            promoted.name = unique_name(promoted.name, taken)
            taken.add(promoted.name)
            result.append(promoted)

    if replacements:
        for _, declaration in _occurrences(result):
            _rewrite_declaration(declaration, replacements)
    return result


def _rewrite(code_type: CodeType | None, replacements: dict[int, NamedType]) -> CodeType | None:
    if code_type is None:
        return None
    replacement = replacements.get(id(code_type))
    if replacement is not None:
        return replacement
    if isinstance(code_type, ExternalType):
        code_type.generics = [_rewrite(g, replacements) for g in code_type.generics]
    return code_type


def _rewrite_functions(functions: list[Function], replacements: dict[int, NamedType]) -> None:
    for func in functions:
        for parameter in func.parameters:
            parameter.type = _rewrite(parameter.type, replacements)
        func.returns = _rewrite(func.returns, replacements)


def _rewrite_declaration(declaration: NamedType, replacements: dict[int, NamedType]) -> None:
    """Point every type slot of a declaration at the promoted copies."""
    if isinstance(declaration, Alias):
        declaration.type = _rewrite(declaration.type, replacements)
    elif isinstance(declaration, Record):
        for prop in declaration.properties:
            prop.type = _rewrite(prop.type, replacements)
        _rewrite_functions(declaration.functions, replacements)
    elif isinstance(declaration, DiscriminatedUnion):
        for case in declaration.cases:
            case.type = _rewrite(case.type, replacements)
        _rewrite_functions(declaration.functions, replacements)
    elif isinstance(declaration, SimpleEnum):
        for prop in declaration.properties:
            prop.type = _rewrite(prop.type, replacements)
        _rewrite_functions(declaration.functions, replacements)
