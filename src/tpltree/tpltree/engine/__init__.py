"""tpltree.engine - tree model, kind registry, type extractor and renderer."""

from tpltree.engine.extractor import FieldType, TypeDescription, extract_type
from tpltree.engine.kinds import DeclaredType, KindSpec, RenderContext, lookup
from tpltree.engine.renderer import CheckResult, check_render, render, render_tree
from tpltree.engine.tree import Collector, Tree, build_tree

__all__ = [
    "Collector",
    "Tree",
    "build_tree",
    "DeclaredType",
    "KindSpec",
    "RenderContext",
    "lookup",
    "FieldType",
    "TypeDescription",
    "extract_type",
    "CheckResult",
    "check_render",
    "render",
    "render_tree",
]
