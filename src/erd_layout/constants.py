"""
Default tuning constants for the layout engine.

These are canvas units (pixels at zoom 1) chosen for visual parity with the
diagram editor. Every placer accepts overrides for the values it uses.
"""

# Grid and hierarchical origin
START_X = 100.0
START_Y = 80.0

# Grid tiling
SPACING_X = 380.0
SPACING_Y = 320.0

# Hierarchical (auto-arrange) placement
HORIZONTAL_SPACING = 380.0
LEVEL_HEIGHT = 320.0
CANVAS_WIDTH = 1200.0

# Force simulation
ITERATIONS = 100
REPULSION = 8000.0
SPRING_LENGTH = 280.0
SPRING_STRENGTH = 0.01
CENTER_FORCE = 0.001
CENTER = (600.0, 400.0)
DAMPING = 0.9
# Seeding box for entities without a prior position: (min_x, min_y, max_x, max_y)
SEED_BOUNDS = (100.0, 100.0, 900.0, 700.0)
