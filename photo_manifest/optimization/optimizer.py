import logging
from pathlib import Path
from typing import Optional, Union

from ..config import BuildSettings
from ..exceptions import OptimizerUnavailableError
from ..models import OptimizedImage
from .backends import CopyingBackend, OptimizingBackend

Backend = Union[CopyingBackend, OptimizingBackend]


def probe_backend(settings: BuildSettings, public_dir: Path) -> Backend:
    """
    Picks the output strategy for a run.

    Falls back to copying originals when the optimizer is disabled or cannot
    be loaded. The failure is logged once; callers cache the result.
    """
    if settings.disable_optimizer:
        logging.info("Image optimization disabled, copying original JPEGs.")
        return CopyingBackend(settings, public_dir)
    try:
        return OptimizingBackend.load(settings, public_dir)
    except OptimizerUnavailableError as e:
        logging.warning(f"{e}, using original JPEGs without optimization.")
        return CopyingBackend(settings, public_dir)


class ImageOptimizer:
    def __init__(self, settings: BuildSettings, public_dir: Path, backend: Optional[Backend] = None):
        self.settings = settings
        self.public_dir = public_dir
        self._backend = backend

    @property
    def backend(self) -> Backend:
        if self._backend is None:
            self._backend = probe_backend(self.settings, self.public_dir)
        return self._backend

    def optimize(self, relative_path: str, absolute_path: Path) -> OptimizedImage:
        return self.backend.produce(relative_path, absolute_path)
