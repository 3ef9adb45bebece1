# -----------------------------------------------------------------------------
# CORE LAYER
# -----------------------------------------------------------------------------
# The README-to-image engine:
# - Extractor: finds the configuration block in a README
# - Decoder: YAML block -> GodotConfig
# - Renderer: GodotConfig -> Dockerfile
# - Assembler: Dockerfile + dotfiles -> build context archive
# - Driver: build context -> BuildService, relaying progress
# - Pipeline: runs the stages in order
# -----------------------------------------------------------------------------

from .assembler import ContextAssembler
from .decoder import decode_config
from .driver import BuildDriver, BuildResult, ProgressUnit, iter_progress
from .extractor import ScanState, extract_config_block, extract_config_block_from_file
from .pipeline import GodotPipeline, PipelineResult, resolve_image_tag
from .renderer import RecipeRenderer

__all__ = [
    "ContextAssembler",
    "decode_config",
    "BuildDriver", "BuildResult", "ProgressUnit", "iter_progress",
    "ScanState", "extract_config_block", "extract_config_block_from_file",
    "GodotPipeline", "PipelineResult", "resolve_image_tag",
    "RecipeRenderer",
]
