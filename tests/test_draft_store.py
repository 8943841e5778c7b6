"""
Tests for the JSON-file store.
"""

import json
import threading
from datetime import datetime, timedelta, timezone
from unittest.mock import patch
import pytest
from hoops_draft.models.draft import DraftSession, Run, RunPick
from hoops_draft.services.draft_store import DraftStore
from hoops_draft.services.errors import StateError

NOW = datetime(2025, 1, 15, 20, 0, 0, tzinfo=timezone.utc)


def _session(token='token-1'):
    return DraftSession(
        id=f'id-{token}',
        session_token=token,
        draw_sequence=['ATL', 'BOS', 'CHI', 'DAL', 'DEN'],
        draw_started_at=NOW,
        created_at=NOW,
        updated_at=NOW,
    )


def _run(share_code='ABC234', team_score=50.0, created_at=NOW, group_code=None):
    pick = RunPick(
        slot='PG', player_name='ATL Guard', team_abbr='ATL', team_name='Atlanta Hawks',
        bpm=1.0, ws48=0.1, vorp=1.0, epm=1.0, contribution=team_score,
    )
    return Run(
        id=f'run-{share_code}',
        share_code=share_code,
        team_score=team_score,
        used_fallback_stats=False,
        picks=[pick],
        created_at=created_at,
        group_code=group_code,
    )


class TestTransactions:
    """Test suite for staged writes."""

    def test_commit_writes_files(self, store):
        with store.transaction() as txn:
            txn.save_session(_session())
            txn.save_run(_run())

        assert store.session_path('token-1').exists()
        assert store.run_path('ABC234').exists()

    def test_exception_discards_writes(self, store):
        with pytest.raises(RuntimeError):
            with store.transaction() as txn:
                txn.save_session(_session())
                raise RuntimeError('boom')

        assert not store.session_path('token-1').exists()

    def test_staged_session_visible_inside_transaction(self, store):
        with store.transaction() as txn:
            txn.save_session(_session())
            assert txn.get_session_by_token('token-1') is not None
            assert not store.session_path('token-1').exists()

    def test_duplicate_share_code_rejected(self, store):
        with store.transaction() as txn:
            txn.save_run(_run())

        with pytest.raises(StateError):
            with store.transaction() as txn:
                txn.save_run(_run())

    def test_replace_run(self, store):
        with store.transaction() as txn:
            txn.save_run(_run(team_score=10.0))
        with store.transaction() as txn:
            txn.save_run(_run(team_score=20.0), replace=True)

        assert store.load_run('ABC234').team_score == 20.0

    def test_no_temp_files_left(self, store):
        with store.transaction() as txn:
            txn.save_session(_session())
        assert [path.name for path in store.sessions_dir.iterdir()] == ['token-1.json']

    def test_failed_session_write_removes_new_run(self, store):
        real_write = store.write_json

        def fail_on_sessions(path, payload):
            if path.parent == store.sessions_dir:
                raise OSError('disk full')
            real_write(path, payload)

        with patch.object(store, 'write_json', side_effect=fail_on_sessions):
            with pytest.raises(OSError):
                with store.transaction() as txn:
                    txn.save_run(_run())
                    txn.save_session(_session())

        assert not store.run_path('ABC234').exists()
        assert not store.session_path('token-1').exists()

    def test_failed_commit_keeps_replaced_run(self, store):
        with store.transaction() as txn:
            txn.save_run(_run(team_score=10.0))

        def fail_on_sessions(path, payload):
            if path.parent == store.sessions_dir:
                raise OSError('disk full')

        with patch.object(store, 'write_json', side_effect=fail_on_sessions):
            with pytest.raises(OSError):
                with store.transaction() as txn:
                    txn.save_run(_run(team_score=20.0), replace=True)
                    txn.save_session(_session())

        assert store.load_run('ABC234').team_score == 10.0


class TestStoreLock:
    """Test suite for lock sharing between stores."""

    def test_same_directory_shares_lock(self, tmp_path):
        first = DraftStore(tmp_path / 'store')
        second = DraftStore(tmp_path / 'store' / '..' / 'store')
        assert first._lock is second._lock

    def test_other_directory_has_own_lock(self, tmp_path):
        first = DraftStore(tmp_path / 'one')
        second = DraftStore(tmp_path / 'two')
        assert first._lock is not second._lock

    def test_second_store_waits_for_open_transaction(self, tmp_path):
        first = DraftStore(tmp_path / 'store')
        second = DraftStore(tmp_path / 'store')
        acquired = []

        def write_from_second():
            with second.transaction() as txn:
                acquired.append(txn.run_exists('ABC234'))

        with first.transaction() as txn:
            txn.save_run(_run())
            worker = threading.Thread(target=write_from_second)
            worker.start()
            worker.join(timeout=0.2)
            assert acquired == []

        worker.join(timeout=5)
        assert acquired == [True]


class TestRunFiles:
    """Test suite for reading runs."""

    def test_load_run(self, store):
        with store.transaction() as txn:
            txn.save_run(_run())
        run = store.load_run('ABC234')
        assert run.share_code == 'ABC234'
        assert run.picks[0].player_name == 'ATL Guard'
        assert run.created_at == NOW

    def test_missing_run(self, store):
        assert store.load_run('ZZZZZZ') is None
        assert store.load_run('../x') is None

    def test_list_runs_skips_malformed(self, store):
        with store.transaction() as txn:
            txn.save_run(_run('AAAAAA'))
            txn.save_run(_run('BBBBBB', created_at=NOW + timedelta(minutes=1)))
        store.run_path('CCCCCC').write_text('{broken', encoding='utf-8')
        store.run_path('DDDDDD').write_text(json.dumps({'id': 'x'}), encoding='utf-8')

        codes = sorted(run.share_code for run in store.list_runs())
        assert codes == ['AAAAAA', 'BBBBBB']
