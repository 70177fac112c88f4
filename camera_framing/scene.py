from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Sequence, Union

import numpy as np
import trimesh

from camera_framing.geometry import as_points, transform_points

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Leaf:
    """Drawable element reduced to its vertex positions in local coordinates."""

    vertices: np.ndarray

    def __post_init__(self):
        object.__setattr__(self, "vertices", as_points(self.vertices))


@dataclass(frozen=True)
class Container:
    """Group or instance: children placed by a 4x4 local transform."""

    children: Sequence["Node"] = ()
    transform: np.ndarray = field(default_factory=lambda: np.eye(4, dtype=np.float64))

    def __post_init__(self):
        object.__setattr__(self, "children", tuple(self.children))
        object.__setattr__(self, "transform", np.asarray(self.transform, dtype=np.float64).reshape(4, 4))


Node = Union[Leaf, Container]


def collect_points(nodes: Union[Node, Iterable[Node]], transform: np.ndarray | None = None) -> np.ndarray:
    """
    All vertex positions under one node or a sequence of nodes, in world space.

    Nested container transforms compose parent first. Duplicates are kept.
    """
    parent = np.eye(4, dtype=np.float64) if transform is None else np.asarray(transform, dtype=np.float64).reshape(4, 4)
    if isinstance(nodes, (Leaf, Container)):
        nodes = (nodes,)

    chunks = []
    for node in nodes:
        if isinstance(node, Leaf):
            chunks.append(transform_points(parent, node.vertices))
        elif isinstance(node, Container):
            chunks.append(collect_points(node.children, parent @ node.transform))
        else:
            raise TypeError(f"unsupported scene node {type(node).__name__}")

    if not chunks:
        return np.zeros((0, 3), dtype=np.float64)
    return np.concatenate(chunks, axis=0)


def unique_points(points) -> np.ndarray:
    pts = as_points(points)
    if pts.shape[0] == 0:
        return pts
    return np.unique(pts, axis=0)


def node_from_trimesh(obj) -> Node:
    """Convert a trimesh.Trimesh or trimesh.Scene into scene nodes."""
    if isinstance(obj, trimesh.Scene):
        children = []
        for node_name in obj.graph.nodes_geometry:
            transform, geometry_name = obj.graph[node_name]
            geom = obj.geometry.get(geometry_name)
            vertices = getattr(geom, "vertices", None)
            if vertices is None:
                continue
            children.append(Container(children=(Leaf(np.asarray(vertices)),), transform=transform))
        return Container(children=children)
    if isinstance(obj, trimesh.Trimesh) or hasattr(obj, "vertices"):
        return Leaf(np.asarray(obj.vertices))
    raise TypeError(f"unsupported trimesh object {type(obj).__name__}")


def load_scene(path: str | Path) -> Node:
    p = Path(path).resolve()
    loaded = trimesh.load(str(p))
    node = node_from_trimesh(loaded)
    logger.info("loaded %s: %d vertices", p.name, collect_points(node).shape[0])
    return node
