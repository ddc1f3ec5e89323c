# -*- coding: utf-8 -*-
"""ellipse and elliptic arc geometry kernel for 2D CAD"""

from importlib.metadata import PackageNotFoundError, version


try:
    __version__ = version("ellipcad")
except PackageNotFoundError:  # pragma: no cover - handled when package not installed
    __version__ = "unknown"
