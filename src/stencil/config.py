"""Configuration constants for template rendering."""

# Canvas resolution used when a template does not set one.
DEFAULT_PPI = 72.0
POINTS_PER_INCH = 72.0

# Text fit loop
FIT_MAX_TRIES = 10

# Value reported for every discovered variable until the caller fills it in.
PLACEHOLDER = "Please replace me with real data"

# File output
DEFAULT_OUTPUT_FILENAME_TEMPLATE = "{template}.pdf"
COMPONENT_PLUGIN_GROUP = "stencil.components"
