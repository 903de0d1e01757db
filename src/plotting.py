"""Visualization functions for bit/byte forests."""

from pathlib import Path

import pydot

from forest import iter_nodes
from models import TreeNode


def build_forest_dot(roots: list[TreeNode], title: str | None = None) -> pydot.Dot:
    """
    Build a Graphviz hierarchical chart of a forest.

    - Bytes appear above their bits (roots at top)
    - Each box shows the person's name and the year they were picked up
    - Nodes where two merged trees were joined are drawn dashed and name the
      tree they were a root of

    Args:
        roots: Root nodes returned by the forest builder
        title: Optional chart title

    Returns:
        The pydot graph, ready to write
    """
    P = pydot.Dot(graph_type="digraph")
    P.set("rankdir", "TB")  # Top-to-bottom (roots at top)
    P.set("splines", "ortho")
    P.set("nodesep", "0.4")
    P.set("ranksep", "0.6")
    if title:
        P.set("label", title)
        P.set("labelloc", "t")

    # Graphviz ids are generated, names may contain ':' or quotes
    node_ids: dict[int, str] = {}
    root_ids = {id(root) for root in roots}

    for i, node in enumerate(iter_nodes(roots)):
        node_id = f"n{i}"
        node_ids[id(node)] = node_id

        label = node.name
        if node.year is not None:
            label += f"\n{node.year}"
        if node.root_of_tree_name:
            label += f"\n[{node.root_of_tree_name}]"

        if node.root_of_tree_name:
            style, fillcolor = "rounded,filled,dashed", "lightyellow"
        elif id(node) in root_ids:
            style, fillcolor = "rounded,filled", "lightgreen"
        else:
            style, fillcolor = "rounded,filled", "lightblue"

        P.add_node(
            pydot.Node(
                node_id,
                label=label,
                shape="box",
                style=style,
                fillcolor=fillcolor,
                fontsize="10",
            )
        )

    for node in iter_nodes(roots):
        for child in node.children:
            P.add_edge(
                pydot.Edge(
                    node_ids[id(node)],
                    node_ids[id(child)],
                    color="darkgray",
                )
            )

    return P


def plot_forest(roots: list[TreeNode], output_path: Path | None = None, title: str | None = None):
    """
    Plot a forest using Graphviz hierarchical layout.

    Args:
        roots: Root nodes returned by the forest builder
        output_path: Path to save the output (png, svg, pdf or dot). If None, displays interactively.
        title: Optional chart title
    """
    P = build_forest_dot(roots, title=title)

    if output_path:
        ext = output_path.suffix.lower().lstrip(".")
        if ext == "dot":
            P.write(str(output_path), format="raw")
        else:
            if ext not in ("png", "svg", "pdf"):
                ext = "png"
            P.write(str(output_path), format=ext)
        print(f"Tree saved to {output_path}")
    else:
        # Save to temporary file and display
        import tempfile

        import matplotlib.image as mpimg
        import matplotlib.pyplot as plt

        with tempfile.NamedTemporaryFile(suffix=".png", delete=False) as f:
            png_path = Path(f.name)
        try:
            P.write(str(png_path), format="png")
            img = mpimg.imread(png_path)
        finally:
            png_path.unlink(missing_ok=True)

        plt.figure(figsize=(20, 16))
        plt.imshow(img)
        plt.axis("off")
        plt.tight_layout()
        plt.show()
