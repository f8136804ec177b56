"""
_utils.py
=========
Label formatting for tree renderers.

These are standalone functions that don't depend on the main classes.  They
turn the builder's state vectors and edge map into the strings a plotting
or layout tool shows as node names and edge captions.
"""

from typing import Dict, Hashable, Mapping, Optional, Sequence, Tuple


def format_state(state) -> str:
    """
    Render a boolean state vector as a string of 0/1 characters.

    Parameters
    ----------
    state : sequence of bool or 0/1
        State vector, one entry per character.

    Returns
    -------
    str
        One character per entry.  An empty vector gives ``''``.

    Examples
    --------
    >>> format_state([True, False, True])
    '101'

    >>> format_state([0, 1, 1, 0])
    '0110'
    """
    return "".join("1" if bool(x) else "0" for x in state)


def labels_to_strings(node_labels: Mapping[Hashable, Sequence]) -> Dict[Hashable, str]:
    """
    Format every state vector in a node-label map.

    >>> labels_to_strings({0: [0, 0], 1: [1, 0]})
    {0: '00', 1: '10'}
    """
    return {node: format_state(state) for node, state in node_labels.items()}


def format_edge_labels(
    edge_labels: Mapping[Tuple[int, int], int],
    characters: Optional[Sequence[str]] = None,
) -> Dict[Tuple[int, int], str]:
    """
    Format character edge labels as captions.

    Parameters
    ----------
    edge_labels : mapping
        ``(parent, child) -> character`` with 1-based characters, as
        returned by ``build``.
    characters : sequence of str, optional
        Character names indexed by 0-based column.  Without it the
        character number itself is used.

    Examples
    --------
    >>> format_edge_labels({(0, 1): 1, (1, 3): 2})
    {(0, 1): '1', (1, 3): '2'}

    >>> format_edge_labels({(0, 1): 1}, characters=['snp_a', 'snp_b'])
    {(0, 1): 'snp_a'}
    """
    if characters is None:
        return {edge: str(char) for edge, char in edge_labels.items()}
    return {edge: str(characters[char - 1]) for edge, char in edge_labels.items()}
