"""
fbas-graphs: trust graphs and influence rankings for Federated Byzantine
Agreement Systems

Turns an FBAS description into an adjacency list or matrix of its trust
relationships and a per-node influence report, both written as CSV.
"""

__version__ = "0.1.0"

__all__ = [
    "Fbas",
    "load_fbas",
    "build_graph",
    "assemble_report",
    "rank_nodes",
    "write_outputs",
    "run",
]


def __getattr__(name):
    """Lazy import to avoid loading numpy and networkx unless needed"""
    if name in ("Fbas", "load_fbas"):
        from . import fbas
        return getattr(fbas, name)
    elif name == "build_graph":
        from .graph.builder import build_graph
        return build_graph
    elif name == "assemble_report":
        from .graph.report import assemble_report
        return assemble_report
    elif name == "rank_nodes":
        from .ranking.algorithms import rank_nodes
        return rank_nodes
    elif name == "write_outputs":
        from .io.writer import write_outputs
        return write_outputs
    elif name == "run":
        from .pipeline import run
        return run
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
