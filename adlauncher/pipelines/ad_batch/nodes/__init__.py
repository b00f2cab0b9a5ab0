"""
Ad batch pipeline nodes.
"""

from .resolve_template import ResolveTemplateNode
from .duplicate_ad_set import DuplicateAdSetNode
from .process_groups import ProcessGroupsNode
from .compile_results import CompileResultsNode

__all__ = [
    "ResolveTemplateNode",
    "DuplicateAdSetNode",
    "ProcessGroupsNode",
    "CompileResultsNode",
]
