"""
Graph utilities
Print and analyse the sub-DAG that a backward pass from a given root would
visit.
"""

import numpy as np
from typing import Dict
from collections import Counter

from .engine import _postorder
from .var import ADVar


def _label(node) -> str:
    if node.op is None:
        return "leaf"
    if node.exponent is not None:
        return f"{node.op.value}^{node.exponent:g}"
    return node.op.value


def get_graph_stats(root: ADVar) -> Dict:
    """
    Statistics of the graph reachable from `root` (nothing is printed).

    Fan-in counts edges into a node from its operands; fan-out counts how
    many derived nodes in the sub-DAG use a node as an operand.
    """
    root.tape.lookup(root.idx, root.serial)
    nodes = root.tape.nodes
    order = _postorder(root.tape, root.idx)

    fan_ins = [len(nodes[i].children) for i in order]
    fan_out = Counter()
    for i in order:
        for c in nodes[i].children:
            fan_out[c] += 1
    fan_outs = [fan_out[i] for i in order]

    op_counter = Counter(nodes[i].op.value for i in order if nodes[i].op is not None)

    return {
        'nodes': len(order),
        'leaves': sum(1 for i in order if nodes[i].op is None),
        'edges': sum(fan_ins),
        'max_fan_in': max(fan_ins),
        'avg_fan_in': float(np.mean(fan_ins)),
        'max_fan_out': max(fan_outs),
        'avg_fan_out': float(np.mean(fan_outs)),
        'operations': dict(op_counter)
    }


def print_graph_summary(root: ADVar, detailed: bool = False) -> Dict:
    """
    Print a summary of the graph below `root`.

    Args:
        root: output node
        detailed: also print the node list (small graphs only)

    Returns:
        the dict from get_graph_stats
    """
    stats = get_graph_stats(root)
    n_nodes = stats['nodes']

    print("\n" + "="*70)
    print("COMPUTATION GRAPH SUMMARY")
    print("="*70)
    print(f"Total nodes:        {n_nodes:,}")
    print(f"Leaves:             {stats['leaves']:,}")
    print(f"Total edges:        {stats['edges']:,}")
    print(f"Max fan-in:         {stats['max_fan_in']}")
    print(f"Avg fan-in:         {stats['avg_fan_in']:.2f}")
    print(f"Max fan-out:        {stats['max_fan_out']}")
    print(f"Avg fan-out:        {stats['avg_fan_out']:.2f}")
    print()
    print("Operation breakdown:")
    for op_type, count in Counter(stats['operations']).most_common():
        pct = 100.0 * count / n_nodes
        print(f"  {op_type:12s}: {count:6,} ({pct:5.1f}%)")
    print("="*70 + "\n")

    if detailed and n_nodes <= 100:
        print_computation_graph(root, max_nodes=100)

    return stats


def print_computation_graph(root: ADVar, max_nodes: int = 20) -> None:
    """
    Print the nodes below `root` in topological order, one per line:
    arena index, operator, value, gradient and operand indices.
    """
    root.tape.lookup(root.idx, root.serial)
    nodes = root.tape.nodes
    order = _postorder(root.tape, root.idx)

    print("\n" + "="*70)
    print("COMPUTATION GRAPH STRUCTURE")
    print("="*70)

    for i in order[:max_nodes]:
        node = nodes[i]
        head = f"Node {i:4d}: {_label(node):12s} ({float(node.val):12.6f}, grad {float(node.adj):12.6f})"
        if node.op is None:
            tag = f" {node.name}" if node.name else ""
            print(f"{head} [leaf{tag}]")
        else:
            parent_info = ", ".join(f"Node{c}" for c in node.children)
            print(f"{head} <- [{parent_info}]")

    if len(order) > max_nodes:
        print(f"... ({len(order) - max_nodes} more nodes)")

    print("="*70 + "\n")
