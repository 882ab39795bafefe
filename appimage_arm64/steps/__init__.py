from .step_10_check_deps import CheckDependenciesStep
from .step_20_resolve_release import ResolveReleaseStep
from .step_30_download_assets import DownloadAssetsStep
from .step_40_extract_appdir import ExtractAppDirStep
from .step_50_overlay_payload import OverlayPayloadStep
from .step_60_build_appimage import BuildAppImageStep
from .step_70_validate_output import ValidateOutputStep
from .step_80_write_outputs import WriteOutputsStep

__all__ = [
    "CheckDependenciesStep",
    "ResolveReleaseStep",
    "DownloadAssetsStep",
    "ExtractAppDirStep",
    "OverlayPayloadStep",
    "BuildAppImageStep",
    "ValidateOutputStep",
    "WriteOutputsStep",
]
