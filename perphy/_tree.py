"""
_tree.py
========
A perfect phylogeny stored as an arena of nodes addressed by integer IDs.

Public API
----------
  InternalNode(key), LeafNode(taxon, key)
      Tagged node variants.  ``key`` is the node's state vector encoded as
      an integer bitmask: bit ``j`` is set iff character ``j + 1`` (column
      ``j``) has mutated on the path from the root.

  PhylogenyTree(nodes, parent, edge_labels, n_characters)
      Read-only tree produced by ``build``.

      .is_leaf(node)            .leaf_of(taxon)         .leaves()
      .state(node)              .internal_node(state)   .path(node)
      .path_characters(node)    .taxon_characters(taxon)
      .edge_character(u, v)     .node_labels()          .to_newick(...)
      .check_invariants(matrix)

Node-ID conventions (set once; never change):
  Root     : 0, always an InternalNode with key 0
  Others   : in creation order, so a parent's ID is always smaller than
             the IDs of its children.

Labels are 1-based: leaves carry taxon ``i + 1`` for matrix row ``i`` and
character edges carry ``j + 1`` for matrix column ``j``.
"""

from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Set, Tuple, Union

import numpy as np

from perphy._matrix import as_binary_matrix
from perphy._utils import format_state


@dataclass(frozen=True)
class InternalNode:
    """A character node, identified by its accumulated state."""

    key: int


@dataclass(frozen=True)
class LeafNode:
    """A taxon leaf; ``key`` repeats the state of the node it hangs from."""

    taxon: int
    key: int


Node = Union[InternalNode, LeafNode]


def state_to_key(state) -> int:
    """Encode a boolean state vector as an integer bitmask (bit j = column j)."""
    key = 0
    for j in np.flatnonzero(np.asarray(state, dtype=np.bool_)):
        key |= 1 << int(j)
    return key


def key_to_state(key: int, n_characters: int) -> np.ndarray:
    """Decode an integer bitmask into a boolean state vector of length *n_characters*."""
    state = np.zeros(n_characters, dtype=np.bool_)
    for j in range(n_characters):
        if (key >> j) & 1:
            state[j] = True
    return state


_NEWICK_SPECIAL = set(" ()[]':;,")


def _newick_name(name: str) -> str:
    if any(ch in _NEWICK_SPECIAL for ch in name):
        return "'" + name.replace("'", "''") + "'"
    return name


class PhylogenyTree:
    """
    A rooted perfect phylogeny with character-labeled edges.

    Attributes (all read-only after construction)
    ----------------------------------------------
    nodes        : list[Node]   Node variant for each node ID.
    n_nodes      : int          Total number of nodes, leaves included.
    n_leaves     : int          Number of taxon leaves.
    n_characters : int          Length of every state vector.
    root         : int          Always 0.
    max_depth    : int          Maximum edge count from the root.
    parent       : int32[n_nodes]  Parent ID; -1 for the root.
    depth        : int32[n_nodes]  Edge depth from the root.
    children     : list[list[int]] Child IDs per node, in creation order.
    edges        : list[(int, int)] Directed (parent, child) edges.
    edge_labels  : dict[(int, int), int]
        1-based character for each character-labeled edge.  Leaf
        attachment edges have no entry.
    """

    def __init__(
        self,
        nodes: Sequence[Node],
        parent: Sequence[int],
        edge_labels: Dict[Tuple[int, int], int],
        n_characters: int,
    ) -> None:
        if len(nodes) != len(parent):
            raise ValueError(
                f"nodes and parent must have equal length "
                f"({len(nodes)} != {len(parent)})."
            )
        if not nodes or not isinstance(nodes[0], InternalNode) or nodes[0].key != 0:
            raise ValueError("Node 0 must be the all-zero InternalNode root.")

        self.nodes: List[Node] = list(nodes)
        self.parent = np.asarray(parent, dtype=np.int32)
        self.edge_labels: Dict[Tuple[int, int], int] = dict(edge_labels)
        self.n_characters: int = int(n_characters)
        self.n_nodes: int = len(self.nodes)
        self.root: int = 0

        self.children: List[List[int]] = [[] for _ in range(self.n_nodes)]
        self.edges: List[Tuple[int, int]] = []
        self.depth = np.zeros(self.n_nodes, dtype=np.int32)
        for child in range(1, self.n_nodes):
            p = int(self.parent[child])
            if not 0 <= p < child:
                raise ValueError(
                    f"Node {child} has parent {p}; parents must precede children."
                )
            self.children[p].append(child)
            self.edges.append((p, child))
            self.depth[child] = self.depth[p] + 1

        self.max_depth: int = int(self.depth.max())

        self._leaf_index: Dict[int, int] = {}
        self._internal_index: Dict[int, int] = {}
        for node_id, node in enumerate(self.nodes):
            if isinstance(node, LeafNode):
                self._leaf_index[node.taxon] = node_id
            else:
                self._internal_index[node.key] = node_id
        self.n_leaves: int = len(self._leaf_index)

    def __repr__(self) -> str:
        return (
            f"PhylogenyTree(n_nodes={self.n_nodes}, n_leaves={self.n_leaves}, "
            f"n_characters={self.n_characters})"
        )

    # ================================================================== #
    # Node queries                                                         #
    # ================================================================== #

    def is_leaf(self, node: int) -> bool:
        return isinstance(self.nodes[node], LeafNode)

    def leaves(self) -> List[int]:
        """Leaf node IDs, ordered by taxon."""
        return [self._leaf_index[t] for t in sorted(self._leaf_index)]

    def leaf_of(self, taxon: int) -> int:
        """
        Node ID of the leaf labeled *taxon* (1-based).

        Raises
        ------
        KeyError   if no leaf carries that taxon.
        """
        if taxon not in self._leaf_index:
            raise KeyError(f"No leaf for taxon {taxon} in tree.")
        return self._leaf_index[taxon]

    def state(self, node: int) -> np.ndarray:
        """Boolean state vector of *node*; leaves share their parent's state."""
        return key_to_state(self.nodes[node].key, self.n_characters)

    def internal_node(self, state) -> int:
        """
        Node ID of the internal node whose state vector is *state*.

        Raises
        ------
        KeyError   if no internal node has that state.
        """
        key = state_to_key(state)
        if key not in self._internal_index:
            raise KeyError(f"No internal node with state {format_state(state)}.")
        return self._internal_index[key]

    def node_labels(self) -> Dict[int, np.ndarray]:
        """State vector for every node, leaves included."""
        return {node_id: self.state(node_id) for node_id in range(self.n_nodes)}

    def edge_character(self, u: int, v: int) -> Optional[int]:
        """Character labeling edge (u, v), or None for a leaf attachment edge."""
        return self.edge_labels.get((u, v))

    # ================================================================== #
    # Paths                                                                #
    # ================================================================== #

    def path(self, node: int) -> List[int]:
        """Node IDs from the root down to *node*, both inclusive."""
        out = [node]
        while self.parent[out[-1]] >= 0:
            out.append(int(self.parent[out[-1]]))
        out.reverse()
        return out

    def path_characters(self, node: int) -> Set[int]:
        """Characters labeling the edges on the root-to-*node* path."""
        p = self.path(node)
        chars = set()
        for u, v in zip(p[:-1], p[1:]):
            c = self.edge_labels.get((u, v))
            if c is not None:
                chars.add(c)
        return chars

    def taxon_characters(self, taxon: int) -> Set[int]:
        """Characters on the path from the root to the leaf of *taxon*."""
        return self.path_characters(self.leaf_of(taxon))

    # ================================================================== #
    # Export                                                               #
    # ================================================================== #

    def to_newick(
        self,
        taxa: Optional[Sequence[str]] = None,
        internal_labels: bool = True,
        characters: Optional[Sequence[str]] = None,
    ) -> str:
        """
        Serialise the tree as an NHX-annotated NEWICK string.

        Leaves are named by taxon (``taxa[taxon - 1]`` when *taxa* is given),
        internal nodes by their 0/1 state string, and every character edge
        carries a ``[&&NHX:char=...]`` comment on its child node.
        Single-child internal nodes are written as ``(child)label``.

        Parameters
        ----------
        taxa : sequence of str, optional
            Taxon names, indexed by 0-based row.
        internal_labels : bool
            Whether to write state strings on internal nodes.
        characters : sequence of str, optional
            Character names, indexed by 0-based column.

        Examples
        --------
        >>> tree, _, _ = build([[1, 0], [1, 1]])
        >>> tree.to_newick()
        '((1,(2)11[&&NHX:char=2])10[&&NHX:char=1])00;'
        """
        # Children always have larger IDs than their parent, so a reverse
        # sweep over IDs visits every subtree before its root.
        rendered: List[str] = [""] * self.n_nodes
        for node_id in range(self.n_nodes - 1, -1, -1):
            node = self.nodes[node_id]
            if isinstance(node, LeafNode):
                name = str(node.taxon) if taxa is None else str(taxa[node.taxon - 1])
                text = _newick_name(name)
            else:
                kids = self.children[node_id]
                text = "(" + ",".join(rendered[k] for k in kids) + ")" if kids else ""
                if internal_labels:
                    text += format_state(self.state(node_id))
            p = int(self.parent[node_id])
            if p >= 0 and (p, node_id) in self.edge_labels:
                char = self.edge_labels[(p, node_id)]
                char_name = str(char) if characters is None else str(characters[char - 1])
                text += f"[&&NHX:char={char_name}]"
            rendered[node_id] = text
        return rendered[0] + ";"

    # ================================================================== #
    # Validation                                                           #
    # ================================================================== #

    def check_invariants(self, matrix) -> None:
        """
        Verify that this tree is a perfect phylogeny for *matrix*.

        Checks that every taxon labels exactly one leaf, that every
        character labels exactly one edge, and that each taxon's
        root-to-leaf characters equal its character set.

        Raises
        ------
        ValueError   listing every violated property.
        """
        arr = as_binary_matrix(matrix)
        n_taxa, n_characters = arr.shape
        problems: List[str] = []

        if n_characters != self.n_characters:
            problems.append(
                f"matrix has {n_characters} characters, tree has {self.n_characters}"
            )

        expected_taxa = set(range(1, n_taxa + 1))
        if set(self._leaf_index) != expected_taxa or self.n_leaves != sum(
            isinstance(node, LeafNode) for node in self.nodes
        ):
            problems.append("taxa do not label exactly one leaf each")
        for leaf in self._leaf_index.values():
            if self.children[leaf]:
                problems.append(f"leaf node {leaf} has children")

        counts = Counter(self.edge_labels.values())
        for char in range(1, n_characters + 1):
            if counts.get(char, 0) != 1:
                problems.append(
                    f"character {char} labels {counts.get(char, 0)} edge(s)"
                )

        for taxon in sorted(expected_taxa & set(self._leaf_index)):
            expected = set((np.flatnonzero(arr[taxon - 1]) + 1).tolist())
            found = self.taxon_characters(taxon)
            if found != expected:
                problems.append(
                    f"taxon {taxon}: path characters {sorted(found)} "
                    f"!= row characters {sorted(expected)}"
                )

        if problems:
            raise ValueError("Not a perfect phylogeny: " + "; ".join(problems))
