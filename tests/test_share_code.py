"""
Tests for share codes and input normalization.
"""

import random
import pytest
from hoops_draft.services.errors import ExhaustionError
from hoops_draft.services.game_config import SHARE_ALPHABET
from hoops_draft.services.share_code import (
    generate_share_code,
    issue_unique_share_code,
    normalize_group_code,
    normalize_seed,
    normalize_share_code,
)


class TestShareCodes:
    """Test suite for share code generation."""

    def test_code_shape(self):
        code = generate_share_code(rng=random.Random(5))
        assert len(code) == 6
        assert all(char in SHARE_ALPHABET for char in code)

    def test_no_lookalike_characters(self):
        rng = random.Random(11)
        codes = ''.join(generate_share_code(rng=rng) for _ in range(200))
        for char in '01IO':
            assert char not in codes

    def test_issue_skips_taken_codes(self):
        taken = set()
        rng = random.Random(3)
        for _ in range(50):
            code = issue_unique_share_code(lambda candidate: candidate in taken, rng=rng)
            assert code not in taken
            taken.add(code)

    def test_issue_retries_after_collision(self):
        calls = []

        def exists(code):
            calls.append(code)
            return len(calls) < 3

        issue_unique_share_code(exists, rng=random.Random(8))
        assert len(calls) == 3

    def test_exhaustion(self):
        with pytest.raises(ExhaustionError) as exc_info:
            issue_unique_share_code(lambda code: True, rng=random.Random(1), max_attempts=20)
        assert str(exc_info.value) == 'Could not generate a unique share code.'


class TestNormalization:
    """Test suite for player-entered codes."""

    @pytest.mark.parametrize('raw, expected', [
        ('  friends night! ', 'FRIENDSNIGHT'),
        ('team_a-1', 'TEAM_A-1'),
        ('abcdefghijklmnopqrstuvwxyz', 'ABCDEFGHIJKLMNOP'),
        ('!!!', None),
        ('', None),
        (None, None),
    ])
    def test_group_code(self, raw, expected):
        assert normalize_group_code(raw) == expected

    def test_seed_trimmed_and_truncated(self):
        assert normalize_seed('  friends-night-1  ') == 'friends-night-1'
        assert normalize_seed('x' * 100) == 'x' * 64
        assert normalize_seed('   ') is None
        assert normalize_seed(None) is None

    def test_share_code(self):
        assert normalize_share_code(' demo01 ') == 'DEMO01'
        assert normalize_share_code(None) == ''
