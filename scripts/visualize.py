#!/usr/bin/env python3
"""
Visualization script for the ERD layouts.

Renders the sample CRM schema under every layout mode into ./build/

Usage:
    python scripts/visualize.py
"""

from pathlib import Path

import matplotlib.pyplot as plt

from erd_layout import Cardinality, LayoutOrchestrator, Relationship

# Output directory
BUILD_DIR = Path(__file__).parent.parent / "build"

MODES = [
    ("grid", "Grid", "grid.png"),
    ("hierarchical", "Hierarchical", "hierarchical.png"),
    ("force", "Force-Directed", "force.png"),
]

EDGE_STYLES = {
    Cardinality.MANY_TO_ONE: "-",
    Cardinality.ONE_TO_MANY: "-",
    Cardinality.MANY_TO_MANY: ":",
}


def ensure_build_dir():
    """Create build directory if it doesn't exist."""
    BUILD_DIR.mkdir(exist_ok=True)


def create_crm_schema():
    """A small CRM schema including one N:N and one self-reference."""
    entities = [
        "account",
        "contact",
        "opportunity",
        "lead",
        "quote",
        "quotedetail",
        "product",
        "marketinglist",
        "systemuser",
    ]
    relationships = [
        Relationship("contact", "account", "N:1"),
        Relationship("opportunity", "account", "N:1"),
        Relationship("opportunity", "contact", "N:1"),
        Relationship("lead", "contact", "N:1"),
        Relationship("quote", "opportunity", "N:1"),
        Relationship("quote", "quotedetail", "1:N"),
        Relationship("quotedetail", "product", "N:1"),
        Relationship("contact", "marketinglist", "N:N"),
        Relationship("account", "systemuser", "N:1"),
        Relationship("account", "account", "N:1"),
    ]
    return entities, relationships


def visualize(positions, relationships, title="ERD Layout", ax=None):
    """Draw entities and relationships from a position map on an axis."""
    for rel in relationships:
        if rel.is_self_reference:
            continue
        src = positions[rel.source]
        tgt = positions[rel.target]
        ax.plot(
            [src.x, tgt.x],
            [src.y, tgt.y],
            EDGE_STYLES[rel.cardinality],
            color="gray",
            alpha=0.6,
            linewidth=1,
        )

    xs = [p.x for p in positions.values()]
    ys = [p.y for p in positions.values()]
    ax.scatter(xs, ys, s=400, c="steelblue", zorder=5, edgecolors="white", linewidth=1)

    for name, pos in positions.items():
        ax.annotate(name, (pos.x, pos.y), xytext=(0, 14), textcoords="offset points",
                    ha="center", fontsize=8)

    ax.set_title(title, fontsize=12, fontweight="bold")
    ax.set_aspect("equal")
    # Canvas y grows downward
    ax.invert_yaxis()
    ax.axis("off")


def save_layout(orchestrator, mode, name, entities, relationships, filename):
    """Compute and save a single layout image."""
    positions = orchestrator.recompute(mode, entities, relationships)

    fig, ax = plt.subplots(figsize=(8, 8))
    visualize(positions, relationships, name, ax=ax)
    plt.tight_layout()

    filepath = BUILD_DIR / filename
    fig.savefig(filepath, dpi=150, bbox_inches="tight", facecolor="white")
    plt.close(fig)
    print(f"  Saved: {filepath}")


def save_comparison(orchestrator, entities, relationships, filename, title):
    """Render every mode side by side."""
    fig, axes = plt.subplots(1, len(MODES), figsize=(6 * len(MODES), 6))

    for ax, (mode, name, _) in zip(axes, MODES):
        positions = orchestrator.recompute(mode, entities, relationships)
        visualize(positions, relationships, name, ax=ax)

    fig.suptitle(title, fontsize=14, fontweight="bold")
    plt.tight_layout()

    filepath = BUILD_DIR / filename
    fig.savefig(filepath, dpi=150, bbox_inches="tight", facecolor="white")
    plt.close(fig)
    print(f"  Saved: {filepath}")


def generate_all():
    """Generate all visualization images."""
    ensure_build_dir()

    entities, relationships = create_crm_schema()
    orchestrator = LayoutOrchestrator(random_seed=42)

    print("Generating individual layout images...")
    for mode, name, filename in MODES:
        save_layout(orchestrator, mode, name, entities, relationships, filename)

    print("Generating comparison image...")
    save_comparison(orchestrator, entities, relationships, "comparison.png", "ERD Layout Modes")

    print()
    print(f"All images saved to: {BUILD_DIR.absolute()}")


if __name__ == "__main__":
    generate_all()
