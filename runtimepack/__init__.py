"""Package a Java application as a Windows installer with a bundled minimal runtime."""

from .config import PackagingConfig, load_config
from .errors import PipelineError, PipelineFailure
from .models import ArtifactSet, PipelineState, Step
from .orchestrator import PackagingPipeline

__version__ = "0.1.0"

__all__ = [
    "ArtifactSet",
    "PackagingConfig",
    "PackagingPipeline",
    "PipelineError",
    "PipelineFailure",
    "PipelineState",
    "Step",
    "load_config",
]
