import os
import logging
from pathlib import Path
from typing import Iterator, List, Tuple
from concurrent.futures import ThreadPoolExecutor

from .. import config
from ..models import SourceImage


class SourceScanner:
    def __init__(self, max_workers: int = 4):
        self.max_workers = max_workers

    def scan(self, root: Path) -> List[SourceImage]:
        """
        Returns every JPEG under root, sorted by absolute path.

        Immediate subdirectories of root are walked in parallel; the final
        sort makes the merge order irrelevant. A missing root is an empty
        project, not an error. Any other OSError propagates.
        """
        try:
            top_files, top_dirs = self._list_dir(root)
        except FileNotFoundError:
            logging.info(f"Photo directory {root} does not exist.")
            return []

        paths = list(top_files)
        if top_dirs:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                for files in executor.map(lambda d: list(self._iter_files(d)), top_dirs):
                    paths.extend(files)

        images = [
            SourceImage(absolute_path=p, relative_path=p.relative_to(root).as_posix())
            for p in paths
            if is_image_file(p)
        ]
        images.sort(key=lambda img: str(img.absolute_path))
        logging.debug(f"Found {len(images)} images out of {len(paths)} files under {root}")
        return images

    def _iter_files(self, root: Path) -> Iterator[Path]:
        """Depth-first walker using os.scandir for speed."""
        stack = [root]
        while stack:
            current = stack.pop()
            files, dirs = self._list_dir(current)
            stack.extend(reversed(dirs))
            yield from files

    def _list_dir(self, directory: Path) -> Tuple[List[Path], List[Path]]:
        with os.scandir(directory) as it:
            entries = list(it)

        files = []
        dirs = []
        for e in entries:
            if e.is_dir(follow_symlinks=False):
                dirs.append(Path(e.path))
            elif e.is_file():
                # Symlinked files are served like regular ones; symlinked dirs are not walked
                files.append(Path(e.path))
        return files, dirs


def is_image_file(path: Path) -> bool:
    return path.suffix in config.IMAGE_EXTS
