"""
JSON-file store for draft sessions and finished runs.

Layout under the store directory:
    sessions/<session_token>.json
    runs/<SHARECODE>.json

All reads and writes for one request happen inside transaction(), which holds
a store-wide lock for the whole read-compute-write cycle. Writes are staged
and only reach disk when the block exits cleanly; each file is replaced
atomically so a reader never sees a half-written record.

The lock is shared by every DraftStore on the same directory, but only within
one process. Running a second process against a live store (for example the
demo seeding script next to the server) is not serialized; stop the server
first.
"""
import json
import logging
import os
import re
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, Optional
from hoops_draft.models.draft import DraftSession, Run
from hoops_draft.services.errors import StateError

logger = logging.getLogger(__name__)

# Tokens and share codes are used as file names
_SAFE_KEY = re.compile(r'^[A-Za-z0-9_-]{1,64}$')

_DIRECTORY_LOCKS = {}
_DIRECTORY_LOCKS_GUARD = threading.Lock()


def _lock_for(store_dir: Path):
    """The process-wide lock for a store directory."""
    key = str(store_dir.resolve())
    with _DIRECTORY_LOCKS_GUARD:
        if key not in _DIRECTORY_LOCKS:
            _DIRECTORY_LOCKS[key] = threading.RLock()
        return _DIRECTORY_LOCKS[key]


class StoreTransaction:
    """Staged reads and writes against a DraftStore; commit() flushes them."""

    def __init__(self, store: 'DraftStore'):
        self._store = store
        self._sessions: Dict[str, dict] = {}
        self._runs: Dict[str, dict] = {}

    def get_session_by_token(self, session_token: str) -> Optional[DraftSession]:
        if session_token in self._sessions:
            return DraftSession.from_record(self._sessions[session_token])

        record = self._store.read_session_record(session_token)
        if record is None:
            return None
        try:
            return DraftSession.from_record(record)
        except KeyError:
            logger.warning("Session record %s is missing its identifiers", session_token)
            return None

    def save_session(self, session: DraftSession):
        self._sessions[session.session_token] = session.to_record()

    def run_exists(self, share_code: str) -> bool:
        return share_code in self._runs or self._store.run_exists(share_code)

    def save_run(self, run: Run, replace: bool = False):
        """Stage a run. Runs are immutable, so an existing code is an error unless replace is set."""
        if not replace and self.run_exists(run.share_code):
            raise StateError(f'Share code {run.share_code} is already taken.')
        self._runs[run.share_code] = run.to_dict()

    def commit(self):
        """Flush staged writes. Runs go first; new run files are removed again if a later write fails."""
        created_runs = []
        try:
            for share_code, payload in self._runs.items():
                path = self._store.run_path(share_code)
                existed = path.exists()
                self._store.write_json(path, payload)
                if not existed:
                    created_runs.append(path)
            for session_token, record in self._sessions.items():
                self._store.write_json(self._store.session_path(session_token), record)
        except OSError:
            logger.error("Store commit failed; removing %d new run file(s)", len(created_runs))
            for path in created_runs:
                if path.exists():
                    path.unlink()
            raise
        finally:
            self.rollback()

    def rollback(self):
        self._sessions.clear()
        self._runs.clear()


class DraftStore:
    """Persists sessions and runs as one JSON file each."""

    def __init__(self, store_dir: Path):
        self.store_dir = Path(store_dir)
        self.sessions_dir = self.store_dir / 'sessions'
        self.runs_dir = self.store_dir / 'runs'
        self.sessions_dir.mkdir(parents=True, exist_ok=True)
        self.runs_dir.mkdir(parents=True, exist_ok=True)
        self._lock = _lock_for(self.store_dir)

    @contextmanager
    def transaction(self) -> Iterator[StoreTransaction]:
        """
        Run a block of store operations atomically.

        Staged writes are committed if the block completes and discarded if it
        raises; the exception propagates unchanged.
        """
        with self._lock:
            txn = StoreTransaction(self)
            try:
                yield txn
            except BaseException:
                txn.rollback()
                raise
            txn.commit()

    def session_path(self, session_token: str) -> Path:
        return self.sessions_dir / f"{session_token}.json"

    def run_path(self, share_code: str) -> Path:
        return self.runs_dir / f"{share_code}.json"

    def read_session_record(self, session_token: str) -> Optional[dict]:
        if not session_token or not _SAFE_KEY.match(session_token):
            return None
        return self._read_json(self.session_path(session_token))

    def run_exists(self, share_code: str) -> bool:
        if not share_code or not _SAFE_KEY.match(share_code):
            return False
        return self.run_path(share_code).exists()

    def load_run(self, share_code: str) -> Optional[Run]:
        """Load a run by its exact share code."""
        if not share_code or not _SAFE_KEY.match(share_code):
            return None
        with self._lock:
            data = self._read_json(self.run_path(share_code))
        if data is None:
            return None
        return self._run_from_dict(data, share_code)

    def list_runs(self) -> List[Run]:
        """All readable runs; unreadable files are skipped with a warning."""
        runs = []
        with self._lock:
            paths = sorted(self.runs_dir.glob('*.json'))
            payloads = [(path.stem, self._read_json(path)) for path in paths]
        for share_code, data in payloads:
            if data is None:
                continue
            run = self._run_from_dict(data, share_code)
            if run is not None:
                runs.append(run)
        return runs

    def write_json(self, path: Path, payload: dict):
        """Write JSON to a temp file in the same directory, then swap it into place."""
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_path = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.stem}.", suffix='.tmp')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(payload, f, indent=2)
            os.replace(temp_path, path)
        except OSError:
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise

    @staticmethod
    def _read_json(path: Path) -> Optional[dict]:
        if not path.exists():
            return None
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.warning("Unreadable store file %s", path)
            return None
        if not isinstance(data, dict):
            logger.warning("Store file %s does not hold an object", path)
            return None
        return data

    @staticmethod
    def _run_from_dict(data: dict, share_code: str) -> Optional[Run]:
        try:
            return Run.from_dict(data)
        except (KeyError, TypeError, ValueError):
            logger.warning("Skipping malformed run %s", share_code)
            return None
