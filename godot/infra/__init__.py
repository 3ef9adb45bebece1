# -----------------------------------------------------------------------------
# INFRASTRUCTURE LAYER
# -----------------------------------------------------------------------------
# Contains low-level infrastructure wrappers:
# - DockerBuildService: Docker SDK build endpoint behind the BuildService protocol
# - GitRepository: shallow clones and file lookup in the fetched repository
# -----------------------------------------------------------------------------

from .docker_client import DockerBuildService
from .git_client import GitRepository

__all__ = ["DockerBuildService", "GitRepository"]
