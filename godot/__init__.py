# -----------------------------------------------------------------------------
# GODOT
# -----------------------------------------------------------------------------
# Builds a development environment Docker image from the configuration block
# in a repository's README.
# -----------------------------------------------------------------------------

__version__ = "0.1.0"
