from typing import Hashable, Iterable

import networkx as nx


def are_all_reachable(G: nx.DiGraph, A: Iterable[Hashable], B: Iterable[Hashable]) -> bool:
    """Whether every node of ``B`` is a descendant of some node of ``A``."""
    reachable_from_A = set()
    for start_node in A:
        reachable_from_A.update(nx.descendants(G, start_node))

    return set(B).issubset(reachable_from_A)
