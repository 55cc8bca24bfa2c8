"""Renderer - evaluates a template tree against a data record.

Like the extractor it is a pure recursive walk: each level returns its
output and the number of failed checks, and the caller concatenates/sums.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from tpltree.config import DEFAULT_CONFIG, EngineConfig
from tpltree.engine.kinds import RenderContext, lookup
from tpltree.engine.tree import (
    MISSING,
    Container,
    Expression,
    LoopMarker,
    Template,
    Tree,
    build_tree,
)
from tpltree.exceptions import (
    InvalidDataKey,
    MissingContent,
    MissingData,
    TemplateStructureError,
)

log = logging.getLogger(__name__)

LoopContext = Mapping[LoopMarker, int]

DEFAULT_LOOP_CONTEXT: LoopContext = {
    LoopMarker.INDEX: 0,
    LoopMarker.RINDEX: 0,
    LoopMarker.COUNT: 1,
}


@dataclass
class CheckResult:
    """Output of a validating render."""

    output: str
    failed_checks: int

    @property
    def ok(self) -> bool:
        return self.failed_checks == 0


def loop_context(j: int, length: int) -> LoopContext:
    """Loop context for element ``j`` of a sequence of ``length`` elements."""
    return {
        LoopMarker.INDEX: j,
        LoopMarker.RINDEX: length - j - 1,
        LoopMarker.COUNT: length,
    }


def _lookup_field(data: Any, name: str) -> Any:
    if isinstance(data, Mapping):
        value = data.get(name)
    else:
        value = getattr(data, name, None)
    return MISSING if value is None else value


def resolve(exp: Expression, data: Any, loop: LoopContext) -> Any:
    """Resolve an expression's data key, returning MISSING when absent."""
    key = exp.key
    if isinstance(key, LoopMarker):
        return loop[key]
    if isinstance(key, str):
        value = _lookup_field(data, key)
        return exp.default if value is MISSING else value
    raise InvalidDataKey(key)


def _content(exp: Container) -> Tree:
    if exp.content is None:
        raise MissingContent(exp.key, exp.kind)
    return exp.content


def _failed(check_result: Optional[str]) -> bool:
    return check_result is not None and check_result != ""


def render_tree(
    tree: Tree,
    data: Any,
    loop: LoopContext = DEFAULT_LOOP_CONTEXT,
    validate: bool = False,
    config: EngineConfig = DEFAULT_CONFIG,
) -> Tuple[str, int]:
    """Render one tree level.

    Args:
        tree: Tree to walk
        data: Data record for this level (mapping or object)
        loop: Current loop context, replaced per array element
        validate: Run ``check`` callables and count failures
        config: Formatting settings

    Returns:
        Tuple of (output, failed check count)
    """
    output = tree.literals[0]
    failed_checks = 0

    for exp, literal in tree.pairs():
        spec = lookup(exp.kind)
        value = resolve(exp, data, loop)
        if exp.transform is not None and value is not MISSING:
            value = exp.transform(value)

        if exp.kind == "array":
            content = _content(exp)
            if value is MISSING:
                raise MissingData(exp.key)
            if isinstance(value, (str, bytes, Mapping)) or not isinstance(
                value, Sequence
            ):
                raise TemplateStructureError(
                    f"Array '{exp.key}' needs a sequence, got {type(value).__name__}"
                )
            log.debug("Rendering array '%s' with %d elements", exp.key, len(value))
            for j, element in enumerate(value):
                child_output, child_failed = render_tree(
                    content, element, loop_context(j, len(value)), validate, config
                )
                output += child_output
                failed_checks += child_failed

        elif exp.kind == "object":
            content = _content(exp)
            if value is MISSING:
                raise MissingData(exp.key)
            child_output, child_failed = render_tree(
                content, value, loop, validate, config
            )
            output += child_output
            failed_checks += child_failed

        elif exp.kind in ("if", "unless"):
            content = _content(exp)
            truthy = value is not MISSING and bool(value)
            if truthy == (exp.kind == "if"):
                child_output, child_failed = render_tree(
                    content, data, loop, validate, config
                )
                output += child_output
                failed_checks += child_failed

        else:
            if value is MISSING:
                raise MissingData(exp.key)
            if spec.render is None:
                raise TemplateStructureError(
                    f"Kind '{exp.kind}' has no render function"
                )
            if getattr(exp, "trim", False) and isinstance(value, str):
                value = value.strip()

            check_result = None
            if validate and exp.check is not None:
                check_result = exp.check(value)
                if _failed(check_result):
                    failed_checks += 1
                    log.debug("Check failed for '%s': %s", exp.key, check_result)
                else:
                    check_result = None

            ctx = RenderContext(
                expression=exp,
                data=data,
                key=exp.key,
                check_result=check_result,
                config=config,
            )
            output += spec.render(value, ctx)

        output += literal

    return output, failed_checks


def render(
    template: Template, data: Any, config: Optional[EngineConfig] = None
) -> str:
    """Render a template definition to a string.

    Checks never run here, so the failure count from render_tree is always
    zero and is dropped.

    Raises:
        MissingData, MissingContent, UnknownKind, InvalidDataKey
    """
    tree = build_tree(template)
    output, _ = render_tree(
        tree, data, validate=False, config=config or DEFAULT_CONFIG
    )
    return output


def check_render(
    template: Template, data: Any, config: Optional[EngineConfig] = None
) -> CheckResult:
    """Render a form template, running every field's ``check``.

    Validation failures never raise; they are counted in the result and
    marked up by the failing fields.
    """
    tree = build_tree(template)
    output, failed_checks = render_tree(
        tree, data, validate=True, config=config or DEFAULT_CONFIG
    )
    if failed_checks:
        log.debug("check_render finished with %d failed checks", failed_checks)
    return CheckResult(output=output, failed_checks=failed_checks)
