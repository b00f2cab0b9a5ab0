"""
Node Metadata for Pipeline Visualization.

This module provides the NodeMetadata class for annotating pipeline nodes
with the state fields they read and write and the service calls they make.

Usage:
    from adlauncher.pipelines.metadata import NodeMetadata

    @dataclass
    class MyNode(BaseNode[MyState]):
        '''Node description.'''

        metadata: ClassVar[NodeMetadata] = NodeMetadata(
            inputs=["field1", "field2"],
            outputs=["result_field"],
            services=["ad_sets.duplicate"],
            fatal=True,
        )

        async def run(self, ctx): ...
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class NodeMetadata:
    """
    Metadata for pipeline node visualization.

    Attributes:
        inputs: State fields read by this node
        outputs: State fields written by this node
        services: Service methods called (e.g., "media.resolve_group")
        fatal: Whether a failure in this node aborts the whole batch
    """

    inputs: List[str] = field(default_factory=list)
    outputs: List[str] = field(default_factory=list)
    services: List[str] = field(default_factory=list)
    fatal: bool = False

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "inputs": self.inputs,
            "outputs": self.outputs,
            "services": self.services,
            "fatal": self.fatal,
        }


def get_node_metadata(node_class) -> Optional[NodeMetadata]:
    """
    Extract metadata from a node class if available.

    Args:
        node_class: A BaseNode subclass

    Returns:
        NodeMetadata if the node has metadata defined, None otherwise
    """
    return getattr(node_class, "metadata", None)


def get_pipeline_summary(node_classes: List) -> dict:
    """
    Summarize a pipeline's nodes: which are batch-fatal and which services they touch.

    Args:
        node_classes: List of node classes in the pipeline

    Returns:
        Dict with node_count, fatal_nodes and services
    """
    fatal_nodes = []
    services = []

    for node_class in node_classes:
        metadata = get_node_metadata(node_class)
        if metadata is None:
            continue
        if metadata.fatal:
            fatal_nodes.append(node_class.__name__)
        for service in metadata.services:
            if service not in services:
                services.append(service)

    return {
        "node_count": len(node_classes),
        "fatal_nodes": fatal_nodes,
        "services": services,
    }
