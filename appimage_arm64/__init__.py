"""ARM64 AppImage repackager.

Builds an aarch64 AppImage from an upstream x86_64 AppImage shell plus the
upstream arm64 tarball payload:
- Resolve the GitHub release and its two assets
- Reuse downloads across runs
- Locate and extract the embedded SquashFS
- Overlay the arm64 payload and repack with appimagetool
- Validate architecture and record a checksum
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
