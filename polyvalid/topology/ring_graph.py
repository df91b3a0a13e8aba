"""Ring touch graph for polygon interior connectivity analysis.

The shell and hole rings of a valid polygon touch only at discrete points.
The "touches" relation induces a graph over the rings of each polygon, and
the polygon interior is connected exactly when that graph has no cycles:
a chain of touching rings which closes on itself cuts off part of the
interior. Two rings touching at two different points also cut off the
interior between them, so that is rejected when the touch is registered,
and the graph never needs more than one edge between a pair of rings.

The touch graph of a valid polygon is therefore a forest. Cycle detection
works for rings which also self-touch (inverted shells, exverted holes).

Rings are stored in an arena owned by the graph and addressed by index;
shell back-references, touch peers and touch-tree parent/root are all arena
indices.
"""

import logging
from collections import deque
from dataclasses import dataclass, field

import networkx as nx

from ..geometry.orientation import is_ccw, is_interior_segment
from ..models.geometry import Coordinate, Ring

logger = logging.getLogger(__name__)

SHELL_ID = -1


@dataclass(frozen=True)
class TouchEdge:
    """A point where a ring touches another ring of the same polygon."""

    peer_id: int  # ring id of the touched ring (hole index, or SHELL_ID)
    peer: int  # arena index of the touched ring
    point: Coordinate

    def is_at(self, pt: Coordinate) -> bool:
        return self.point[0] == pt[0] and self.point[1] == pt[1]


@dataclass(frozen=True)
class SelfTouchNode:
    """A point where a ring touches itself.

    Records the node and three of the four adjacent segment endpoints:
    e00 and e01 surround the node on the first pass of the ring through it,
    e10 precedes it on the second pass. The fourth endpoint is not needed,
    since the configuration around the node is symmetric.
    """

    point: Coordinate
    e00: Coordinate
    e01: Coordinate
    e10: Coordinate

    def is_exterior(self, is_interior_on_right: bool) -> bool:
        """Test if both halves of the self-touch lie in the polygon exterior.

        That is a valid self-touch, for both shells and holes. Either corner
        and either of the other edges could be tested with the same result.

        Args:
            is_interior_on_right: Whether the polygon interior is on the
                right of the ring direction
        """
        is_interior_seg = is_interior_segment(self.point, self.e00, self.e01, self.e10)
        return not is_interior_seg if is_interior_on_right else is_interior_seg


@dataclass
class RingNode:
    """One shell or hole ring together with its touch bookkeeping."""

    index: int  # position in the arena
    ring: Ring
    id: int  # hole index within its polygon, or SHELL_ID
    shell: int  # arena index of the owning shell (own index for a shell)
    polygon: int = 0  # ordinal of the owning polygon
    touches: dict[int, TouchEdge] = field(default_factory=dict)
    self_nodes: list[SelfTouchNode] = field(default_factory=list)

    # Touch-tree state, valid during a single cycle-detection pass
    touch_tree_root: int | None = None
    touch_tree_parent: int | None = None

    @property
    def is_shell(self) -> bool:
        return self.shell == self.index

    @property
    def is_in_touch_tree(self) -> bool:
        return self.touch_tree_root is not None

    def is_only_touch(self, peer: "RingNode", pt: Coordinate) -> bool:
        """Test if this ring touches the peer nowhere, or only at pt."""
        touch = self.touches.get(peer.id)
        if touch is None:
            return True
        return touch.is_at(pt)

    def add_touch(self, peer: "RingNode", pt: Coordinate) -> None:
        if peer.id not in self.touches:
            self.touches[peer.id] = TouchEdge(peer.id, peer.index, pt)

    def find_interior_self_touch(self) -> Coordinate | None:
        """Location of a self-touch which disconnects the interior, if any."""
        if not self.self_nodes:
            return None

        # Interior is on the right for a CW shell or a CCW hole
        is_interior_on_right = self.is_shell ^ is_ccw(self.ring)

        for node in self.self_nodes:
            if not node.is_exterior(is_interior_on_right):
                return node.point
        return None


class RingTouchGraph:
    """Rings of one polygon (or of all elements of a multipolygon) and their touches."""

    def __init__(self):
        self.nodes: list[RingNode] = []

    def __len__(self) -> int:
        return len(self.nodes)

    def __getitem__(self, index: int) -> RingNode:
        return self.nodes[index]

    def add_shell(self, ring: Ring, polygon: int = 0) -> int:
        """Add a shell ring and return its arena index."""
        index = len(self.nodes)
        self.nodes.append(RingNode(index=index, ring=ring, id=SHELL_ID, shell=index, polygon=polygon))
        return index

    def add_hole(self, ring: Ring, hole_index: int, shell: int) -> int:
        """Add a hole ring owned by the given shell and return its arena index."""
        index = len(self.nodes)
        polygon = self.nodes[shell].polygon
        self.nodes.append(
            RingNode(index=index, ring=ring, id=hole_index, shell=shell, polygon=polygon)
        )
        return index

    def register_touch(self, ring_a: int | None, ring_b: int | None, pt: Coordinate) -> bool:
        """Record that two rings touch at a point.

        Rings which are not tracked (None), rings of different polygons and
        a ring paired with itself are ignored.

        Returns:
            True if the rings already touch at a different point (a double
            touch, which disconnects the interior); the graph is unchanged
        """
        if ring_a is None or ring_b is None or ring_a == ring_b:
            return False

        node_a = self.nodes[ring_a]
        node_b = self.nodes[ring_b]
        if node_a.shell != node_b.shell:
            return False

        if not node_a.is_only_touch(node_b, pt):
            return True
        if not node_b.is_only_touch(node_a, pt):
            return True

        node_a.add_touch(node_b, pt)
        node_b.add_touch(node_a, pt)
        return False

    def record_self_touch(
        self,
        ring: int,
        pt: Coordinate,
        e00: Coordinate,
        e01: Coordinate,
        e10: Coordinate,
        e11: Coordinate,
    ) -> None:
        """Record a self-touch node on a ring (e11 is implied by symmetry)."""
        self.nodes[ring].self_nodes.append(SelfTouchNode(pt, e00, e01, e10))

    def reset_touch_trees(self) -> None:
        for node in self.nodes:
            node.touch_tree_root = None
            node.touch_tree_parent = None

    def find_touch_cycle_location(self, indices: list[int] | None = None) -> Coordinate | None:
        """Find a point on a cycle of touching rings, if one exists.

        Each ring not yet reached becomes the root of a new touch tree, which
        is grown breadth-first. Reaching a ring already in the current tree
        by a new edge closes a cycle.

        Args:
            indices: Arena indices of the rings to scan (default all rings)

        Returns:
            The touch point closing a cycle, or None if the touch relation
            is a forest
        """
        self.reset_touch_trees()
        if indices is None:
            indices = range(len(self.nodes))

        for index in indices:
            if self.nodes[index].is_in_touch_tree:
                continue
            cycle_pt = self._scan_touch_tree(index)
            if cycle_pt is not None:
                return cycle_pt
        return None

    def _scan_touch_tree(self, root: int) -> Coordinate | None:
        root_node = self.nodes[root]
        root_node.touch_tree_parent = root
        root_node.touch_tree_root = root

        queue = deque([root])
        while queue:
            node = self.nodes[queue.popleft()]
            for touch in node.touches.values():
                # the edge back to the ring which reached this one
                if touch.peer == node.touch_tree_parent:
                    continue

                peer = self.nodes[touch.peer]
                # already reached from a different ring of this tree
                if peer.touch_tree_root == root:
                    return touch.point

                peer.touch_tree_parent = node.index
                peer.touch_tree_root = root
                queue.append(peer.index)
        return None

    def find_interior_self_touch(self, indices: list[int] | None = None) -> Coordinate | None:
        """Find a self-touch which disconnects a polygon interior, if any."""
        if indices is None:
            indices = range(len(self.nodes))
        for index in indices:
            pt = self.nodes[index].find_interior_self_touch()
            if pt is not None:
                return pt
        return None

    def to_networkx(self) -> nx.Graph:
        """Export the touch relation as an undirected NetworkX graph."""
        graph = nx.Graph()
        for node in self.nodes:
            graph.add_node(
                node.index,
                ring_id=node.id,
                is_shell=node.is_shell,
                polygon=node.polygon,
                self_touches=len(node.self_nodes),
            )
        for node in self.nodes:
            for touch in node.touches.values():
                graph.add_edge(node.index, touch.peer, point=touch.point)
        return graph

    def is_forest(self) -> bool:
        """Check acyclicity of the touch relation with NetworkX."""
        if not self.nodes:
            return True
        return nx.is_forest(self.to_networkx())
