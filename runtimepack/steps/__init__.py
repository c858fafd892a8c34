"""Pipeline step implementations."""

from .installer import InstallerBuilder, InstallerResult
from .runtime_image import RuntimeImageSynthesizer, SynthesisResult, module_name_for
from .stager import ArtifactStager, StageResult

__all__ = [
    "ArtifactStager",
    "InstallerBuilder",
    "InstallerResult",
    "RuntimeImageSynthesizer",
    "StageResult",
    "SynthesisResult",
    "module_name_for",
]
