"""
Output Writer

Writes the transformed files of one target to disk.

The primary file of a format becomes the target file itself; every other file
lands at ``<target folder>/<rel_path>``. Copy-action files are copied verbatim
from the theme. Format symlinks are (re)created after the files are written.
"""

import shutil
from pathlib import Path
from typing import Any, Callable, List, Optional

from vitae.contexts.rendering.logger import _log_debug, _log_warning
from vitae.contexts.templating.engine import TransformedFile
from vitae.contexts.theming.theme import FormatDescriptor

PreSaveHook = Callable[[TransformedFile, str], Optional[str]]


def _fire(options: Any, hook: str, path: Path) -> None:
    callback = getattr(options, hook, None)
    if callback:
        callback(path)


class OutputWriter:
    """Persists transformed files and format symlinks."""

    def output_path(self, transformed: TransformedFile, target_file: Path) -> Path:
        if transformed.info.primary:
            return Path(target_file)
        return Path(target_file).parent / transformed.info.rel_path

    def write(
        self,
        files: List[TransformedFile],
        target_file: Path,
        pre_save: Optional[PreSaveHook] = None,
        options: Any = None,
    ) -> List[Path]:
        """
        Write a target's files.

        Args:
            files: Output of TemplateEngine.invoke()
            target_file: Path of the target (receives the primary file)
            pre_save: Generator hook run on transformed text; a falsy return skips the file
            options: Build options carrying before_write / after_write callbacks

        Returns:
            Paths actually written
        """
        written = []
        for transformed in files:
            destination = self.output_path(transformed, target_file)

            if transformed.info.action == "copy":
                _fire(options, "before_write", destination)
                destination.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(transformed.info.path, destination)
                _fire(options, "after_write", destination)
                written.append(destination)
                continue

            data = transformed.data
            if pre_save is not None:
                data = pre_save(transformed, data)
                if not data:
                    _log_debug(f"Skipped {destination.name} (suppressed before save)")
                    continue

            _fire(options, "before_write", destination)
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_text(data or "", encoding="utf-8")
            _fire(options, "after_write", destination)
            written.append(destination)

        _log_debug(f"Wrote {len(written)} file(s) for {Path(target_file).name}")
        return written

    def create_symlinks(self, fmt: FormatDescriptor, out_folder: Path) -> List[Path]:
        """
        Create the format's symlinks inside the output folder.

        Each ``location`` (relative to out_folder) points at ``target``
        (relative to the location's parent). Existing links or files at the
        location are replaced.
        """
        created = []
        for location, target in fmt.symlinks.items():
            link = Path(out_folder) / location
            link.parent.mkdir(parents=True, exist_ok=True)

            if link.is_symlink() or link.is_file():
                link.unlink()
            elif link.exists():
                _log_warning(f"Not replacing directory {link} with a symlink")
                continue

            link.symlink_to(target, target_is_directory=(link.parent / target).is_dir())
            created.append(link)
        return created
