import os
import stat
import tempfile
from pathlib import Path


def atomic_write_bytes(path: Path, data: bytes, new_file_mode: int) -> None:
    """Replace the file at path with data, so readers see either the old or the new content.

    The data goes to a temp file in the same directory, is fsynced, and is then
    renamed over the target. An existing file keeps its permission bits; a new
    file gets new_file_mode. The parent directory must already exist.

    The caller is responsible for catching OSError if the write fails.
    """
    try:
        target_mode = stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        target_mode = new_file_mode

    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as tmp_file:
            tmp_file.write(data)
            tmp_file.flush()
            os.fsync(tmp_file.fileno())
        os.chmod(tmp_path, target_mode)
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
