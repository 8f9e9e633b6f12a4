from __future__ import annotations

import os
import shutil
from pathlib import Path


def path_exists(path: Path) -> bool:
    """Like Path.exists, but also true for dangling symbolic links."""
    return path.is_symlink() or path.exists()


def source_exists(path: Path) -> bool:
    """Whether the path (or the target of the symbolic link) exists. Only a
    missing path counts as absent, any other error is raised."""
    try:
        os.stat(path)
    except (FileNotFoundError, NotADirectoryError):
        return False
    return True


def _is_within(path: str, directory: str) -> bool:
    return os.path.commonpath([path, directory]) == directory


def relocate_symlinks(source: Path, destination: Path):
    """Rewrite the relative symbolic links in a copied tree whose targets lie
    outside of it. Their targets are resolved against the directory of the
    original link and made absolute, links within the tree are kept as-is."""
    source_dir = os.path.abspath(source)
    for dirpath, dirs, files in os.walk(str(destination)):
        rel = os.path.relpath(dirpath, str(destination))
        for name in dirs + files:
            link = os.path.join(dirpath, name)
            if not os.path.islink(link):
                continue
            target = os.readlink(link)
            if os.path.isabs(target):
                continue
            orig_dir = os.path.normpath(os.path.join(source_dir, rel))
            full = os.path.normpath(os.path.join(orig_dir, target))
            if _is_within(full, source_dir):
                continue
            os.remove(link)
            os.symlink(full, link, target_is_directory=os.path.isdir(full))


class FileRunner:
    def __init__(self, verbose: bool = False, dry: bool = False):
        self.verbose = verbose
        self.dry = dry

    def _print(self, *args):
        if self.verbose or self.dry:
            print(*args, flush=True)

    def remove(self, path: Path):
        """Recursively remove a directory, or unlink a file or symbolic link.
        Does nothing if the path does not exist."""
        if path.is_symlink() or path.is_file():
            self._print("rm", path)
            if not self.dry:
                path.unlink()
        elif path.is_dir():
            self._print("rm -r", path)
            if not self.dry:
                shutil.rmtree(path)
        elif path_exists(path):
            # Sockets, FIFOs, device nodes
            self._print("rm", path)
            if not self.dry:
                path.unlink()

    def copy(self, source: Path, destination: Path):
        """Copy a directory tree or a single file to the given destination,
        which must not exist yet. A symbolic link as the source is followed.
        Links inside the tree stay links, see relocate_symlinks."""
        if source.is_symlink():
            source = source.resolve()
        if source.is_dir():
            self._print("cp -r", source, destination)
            if not self.dry:
                shutil.copytree(source, destination, symlinks=True)
                relocate_symlinks(source, destination)
        else:
            self._print("cp", source, destination)
            if not self.dry:
                shutil.copy2(source, destination)
