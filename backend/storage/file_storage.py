"""
File storage abstraction.

Provides a simple interface for storing and retrieving rendered colorblocks.
Currently uses local filesystem, can be extended to S3 or other backends.
"""
import shutil
from pathlib import Path
from typing import Optional

from settings import settings


class FileStorage:
    """
    Local file storage implementation.

    Files are organized as:
    - media/projects/{project_id}/colorblocks/  - Final colorblock renders
    """

    def __init__(self, media_root: Optional[str] = None):
        self.media_root = Path(media_root or settings.MEDIA_ROOT)
        self.media_root.mkdir(parents=True, exist_ok=True)

    def get_project_colorblocks_dir(self, project_id: str) -> Path:
        """Get the colorblocks directory for a project."""
        path = self.media_root / "projects" / project_id / "colorblocks"
        path.mkdir(parents=True, exist_ok=True)
        return path

    def save_colorblock(self, project_id: str, statement_id: str, png: bytes) -> str:
        """
        Save a rendered colorblock PNG.

        Returns:
            Relative path to the saved file (overwrites any previous render)
        """
        file_path = self.get_project_colorblocks_dir(project_id) / f"{statement_id}.png"
        # Write then rename so readers never see a half-written render.
        tmp_path = file_path.with_suffix(".png.tmp")
        tmp_path.write_bytes(png)
        tmp_path.replace(file_path)
        return file_path.relative_to(self.media_root).as_posix()

    def read_bytes(self, relative_path: str) -> bytes:
        return self.get_absolute_path(relative_path).read_bytes()

    def get_absolute_path(self, relative_path: str) -> Path:
        """Convert a relative path to absolute."""
        return self.media_root / relative_path

    def file_exists(self, relative_path: str) -> bool:
        """Check if a file exists."""
        return (self.media_root / relative_path).exists()

    def delete_file(self, relative_path: str) -> bool:
        """Delete a file. Returns True if deleted."""
        path = self.media_root / relative_path
        if path.exists():
            path.unlink()
            return True
        return False

    def delete_project_files(self, project_id: str) -> bool:
        """Delete all files for a project."""
        project_dir = self.media_root / "projects" / project_id
        if project_dir.exists():
            shutil.rmtree(project_dir)
            return True
        return False
