"""
Safe I/O operations with atomic writes and cooperative file locking.

Failures are translated into trackit storage errors so callers can tell a
full disk apart from an unreadable location.
"""

import contextlib
import errno
import os
import tempfile
import time
from pathlib import Path
from typing import Iterator, Optional, Union

from ..core.exceptions import QuotaExceededError, StorageUnavailableError

try:  # fcntl is only available on POSIX platforms
    import fcntl  # type: ignore
except ImportError:  # pragma: no cover - Windows fallback
    fcntl = None  # type: ignore


DEFAULT_LOCK_TIMEOUT = 8.0  # seconds
LOCK_SLEEP_INTERVAL = 0.05  # seconds

_QUOTA_ERRNOS = {errno.ENOSPC, getattr(errno, "EDQUOT", errno.ENOSPC), errno.EFBIG}

PathLike = Union[str, Path]


def _lock_file_path(path: Path) -> Path:
    """Return the companion lock file path for the target file."""
    return path.parent / f"{path.name}.lock"


@contextlib.contextmanager
def _file_lock(target_path: Path, exclusive: bool, timeout: float = DEFAULT_LOCK_TIMEOUT) -> Iterator[None]:
    """Acquire a cooperative file lock around the target path.

    Uses POSIX advisory locking via fcntl when available; otherwise acts as a no-op.
    """
    if fcntl is None:
        yield
        return

    lock_path = _lock_file_path(target_path)
    lock_path.parent.mkdir(parents=True, exist_ok=True)

    lock_type = fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH
    deadline = time.monotonic() + timeout if timeout is not None else None

    with open(lock_path, "a") as lock_file:
        while True:
            try:
                flags = lock_type | fcntl.LOCK_NB if deadline is not None else lock_type
                fcntl.flock(lock_file.fileno(), flags)
                break
            except OSError as exc:  # pragma: no cover - depends on timing
                if exc.errno not in (errno.EACCES, errno.EAGAIN):
                    raise
                if deadline is not None and time.monotonic() >= deadline:
                    raise TimeoutError(f"Timed out waiting for lock on {target_path}") from exc
                time.sleep(LOCK_SLEEP_INTERVAL)

        try:
            yield
        finally:
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)


def _translate_os_error(action: str, path: Path, exc: OSError) -> Exception:
    if exc.errno in _QUOTA_ERRNOS:
        return QuotaExceededError(f"No space left to {action} {path}: {exc}")
    return StorageUnavailableError(f"Could not {action} {path}: {exc}")


def read_text(file_path: PathLike, *, lock_timeout: float = DEFAULT_LOCK_TIMEOUT) -> Optional[str]:
    """
    Read a UTF-8 text file under a shared lock.

    Args:
        file_path: Path to read

    Returns:
        File content, or None if the file does not exist

    Raises:
        StorageUnavailableError: if the file exists but cannot be read
    """
    path_obj = Path(os.path.expanduser(str(file_path)))

    if not path_obj.exists():
        return None

    try:
        with _file_lock(path_obj, exclusive=False, timeout=lock_timeout):
            with path_obj.open('r', encoding='utf-8') as handle:
                return handle.read()
    except TimeoutError as exc:
        raise StorageUnavailableError(str(exc)) from exc
    except UnicodeDecodeError as exc:
        raise StorageUnavailableError(f"{path_obj} is not UTF-8 text: {exc}") from exc
    except OSError as exc:
        raise _translate_os_error("read", path_obj, exc) from exc


def atomic_write(file_path: PathLike, content: str, *, lock_timeout: float = DEFAULT_LOCK_TIMEOUT) -> Path:
    """
    Atomically write content to file.

    The content goes to a temporary sibling first and is moved into place
    with ``os.replace``, so readers never observe a half-written file.

    Args:
        file_path: Path to write to
        content: Content to write

    Returns:
        The resolved path that was written

    Raises:
        QuotaExceededError: if the filesystem is out of space or quota
        StorageUnavailableError: for any other I/O failure or a lock timeout
    """
    path_obj = Path(os.path.expanduser(str(file_path)))

    tmp_path = None
    try:
        path_obj.parent.mkdir(parents=True, exist_ok=True)
        with _file_lock(path_obj, exclusive=True, timeout=lock_timeout):
            with tempfile.NamedTemporaryFile(
                mode='w',
                dir=str(path_obj.parent),
                prefix='.tmp_',
                delete=False,
                encoding='utf-8'
            ) as tmp_file:
                tmp_path = Path(tmp_file.name)
                tmp_file.write(content)

            os.replace(str(tmp_path), str(path_obj))
        return path_obj

    except TimeoutError as exc:
        raise StorageUnavailableError(str(exc)) from exc
    except OSError as exc:
        raise _translate_os_error("write", path_obj, exc) from exc
    finally:
        if tmp_path and tmp_path.exists():
            try:
                tmp_path.unlink()
            except OSError:
                pass


def remove_file(file_path: PathLike, *, lock_timeout: float = DEFAULT_LOCK_TIMEOUT) -> bool:
    """
    Delete a file under an exclusive lock.

    Returns:
        True if a file was removed, False if it did not exist
    """
    path_obj = Path(os.path.expanduser(str(file_path)))
    if not path_obj.exists():
        return False

    try:
        with _file_lock(path_obj, exclusive=True, timeout=lock_timeout):
            path_obj.unlink()
        return True
    except FileNotFoundError:
        return False
    except TimeoutError as exc:
        raise StorageUnavailableError(str(exc)) from exc
    except OSError as exc:
        raise _translate_os_error("delete", path_obj, exc) from exc
