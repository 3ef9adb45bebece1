# -----------------------------------------------------------------------------
# DOMAIN LAYER
# -----------------------------------------------------------------------------
# Contains the README configuration record (Pydantic model) shared by every
# stage of the build pipeline, and the BuildService contract between the
# Driver and the Docker infrastructure.
# -----------------------------------------------------------------------------

from .build import BuildOptions, BuildResponse, BuildService
from .models import README_KEYS, GodotConfig

__all__ = ["BuildOptions", "BuildResponse", "BuildService", "README_KEYS", "GodotConfig"]
