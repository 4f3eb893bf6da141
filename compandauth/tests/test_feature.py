"""End-to-end session lifecycle tests.

Entities hold a CAA and a window; sessions carry the token returned by
issue(). These mirror how an application uses the library: mint tokens
into sessions, then validate sessions against the entity's current CAA.
"""

from dataclasses import dataclass, field
from datetime import timedelta

import pytest

from compandauth.caa import CAA, CounterCAA, SessionPolicy, TimeoutCAA
from compandauth.core.time import to_seconds, to_unix

SIGN_GRID = [(token, window) for window in (-1, 0, 1) for token in (-1, 0, 1)]


@dataclass
class CounterEntity:
    delta: int
    caa: CAA = field(default_factory=CounterCAA)


@dataclass
class TimeoutEntity:
    timeout: timedelta
    caa: CAA


@dataclass
class Session:
    caa: int = 0


@pytest.mark.security
class TestUnissuedAndLocked:
    """Unissued or locked CAAs refuse every token."""

    @pytest.mark.parametrize("token,delta", SIGN_GRID)
    def test_counter_unissued_always_invalid(self, token, delta):
        """No token validates against a counter that never issued."""
        entity = CounterEntity(delta=delta)

        assert entity.caa.is_valid(Session(token).caa, entity.delta) is False

    @pytest.mark.parametrize("token,seconds", SIGN_GRID)
    def test_timeout_unissued_always_invalid(self, clock, token, seconds):
        """No token validates against a timeout CAA that never issued."""
        entity = TimeoutEntity(timeout=timedelta(seconds=seconds), caa=TimeoutCAA(clock=clock))

        assert entity.caa.is_valid(Session(token).caa, to_seconds(entity.timeout)) is False

    @pytest.mark.parametrize("value", [-1, 1])
    @pytest.mark.parametrize("token,delta", SIGN_GRID)
    def test_counter_locked_always_invalid(self, value, token, delta):
        """Locking a counter refuses every token and window."""
        entity = CounterEntity(delta=delta, caa=CounterCAA(value))
        entity.caa.lock()

        assert entity.caa.is_valid(Session(token).caa, entity.delta) is False

    @pytest.mark.parametrize("value", [-1, 1])
    @pytest.mark.parametrize("token,seconds", SIGN_GRID)
    def test_timeout_locked_always_invalid(self, clock, value, token, seconds):
        """Locking a timeout CAA refuses every token and duration."""
        entity = TimeoutEntity(timeout=timedelta(seconds=seconds), caa=TimeoutCAA(value, clock=clock))
        entity.caa.lock()

        assert entity.caa.is_valid(Session(token).caa, to_seconds(entity.timeout)) is False


class TestCounterSessions:
    """Counter sliding window across many sessions."""

    @pytest.mark.parametrize("delta,n", [(0, 10), (1, 50), (5, 100), (10, 200)])
    def test_only_last_delta_sessions_are_valid(self, delta, n):
        """After each issue only the newest delta sessions validate."""
        entity = CounterEntity(delta=delta)
        sessions = []

        for _ in range(n):
            sessions.append(Session(entity.caa.issue()))

            for j, session in enumerate(sessions):
                expected = len(sessions) - j <= entity.delta
                assert entity.caa.is_valid(session.caa, entity.delta) is expected

    def test_ten_sessions_with_window_of_five(self):
        """Ten issues with a window of five keep tokens 5..9."""
        entity = CounterEntity(delta=5)
        tokens = [entity.caa.issue() for _ in range(10)]

        assert tokens == list(range(10))
        assert [t for t in tokens if entity.caa.is_valid(t, 5)] == [5, 6, 7, 8, 9]

    @pytest.mark.parametrize(
        "delta,n,revoke_n",
        [
            (0, 0, 0),
            (0, 0, 1),
            (0, 1, 1),
            (1, 1, 0),
            (1, 0, 1),
            (1, 1, 1),
            (1, 2, 2),
            *[(10, 10, r) for r in range(1, 12)],
            (5, 100, 50),
            (5, 100, 99),
            (5, 100, 150),
        ],
    )
    def test_revoke_invalidates_oldest_sessions(self, delta, n, revoke_n):
        """revoke(n) drops the n oldest sessions still in the window."""
        entity = CounterEntity(delta=delta)
        sessions = [Session(entity.caa.issue()) for _ in range(n)]

        entity.caa.revoke(revoke_n)

        first_valid = max(min(n - delta + revoke_n, n), 0)
        assert len(sessions[first_valid:]) == max(delta - revoke_n, 0)
        for session in sessions[first_valid:]:
            assert entity.caa.is_valid(session.caa, entity.delta) is True
        for session in sessions[:first_valid]:
            assert entity.caa.is_valid(session.caa, entity.delta) is False

    def test_lock_unlock_round_trips_validity(self):
        """Lock then unlock restores the exact validity of every token."""
        entity = CounterEntity(delta=5)
        tokens = [entity.caa.issue() for _ in range(10)]
        before = [entity.caa.is_valid(t, 5) for t in tokens]

        entity.caa.lock()
        assert not any(entity.caa.is_valid(t, 5) for t in tokens)

        entity.caa.unlock()
        assert [entity.caa.is_valid(t, 5) for t in tokens] == before

    def test_issuing_while_locked_still_advances_window(self):
        """Issues made while locked still push older tokens out."""
        entity = CounterEntity(delta=5)
        tokens = [entity.caa.issue() for _ in range(5)]

        entity.caa.lock()
        tokens += [entity.caa.issue(), entity.caa.issue()]
        assert not any(entity.caa.is_valid(t, 5) for t in tokens)

        entity.caa.unlock()
        assert [t for t in tokens if entity.caa.is_valid(t, 5)] == [2, 3, 4, 5, 6]


class TestTimeoutSessions:
    """Timeout expiry and anchor cut-offs over simulated time."""

    def test_sessions_only_valid_for_timeout(self, clock, start):
        """Every session expires exactly once the timeout passes."""
        entity = TimeoutEntity(timeout=timedelta(seconds=30), caa=TimeoutCAA(clock=clock))
        timeout = to_seconds(entity.timeout)
        sessions = []

        end = to_unix(start) + to_seconds(timedelta(minutes=2))
        while to_unix(clock.now()) < end:
            sessions.append(Session(entity.caa.issue()))

            now = to_unix(clock.now())
            for session in sessions:
                expected = now - session.caa <= timeout
                assert entity.caa.is_valid(session.caa, timeout) is expected

            clock.advance(1)

    def test_token_expires_one_second_after_duration(self, clock):
        """A token is valid through token + duration and not a second longer."""
        caa = TimeoutCAA(clock=clock)
        token = caa.issue()

        for _ in range(30):
            assert caa.is_valid(token, 30) is True
            clock.advance(1)
        assert caa.is_valid(token, 30) is True

        clock.advance(1)
        assert caa.is_valid(token, 30) is False

    def test_revoke_invalidates_sessions_before_cutoff(self, clock, start):
        """Moving the anchor refuses tokens minted before it."""
        caa = TimeoutCAA(clock=clock)
        base = to_unix(start)
        tokens = []
        for _ in range(120):
            tokens.append(caa.issue())
            clock.advance(1)

        cutoff = base + 50
        caa.revoke(cutoff)

        # Long duration: only the cut-off matters
        assert [t for t in tokens if caa.is_valid(t, 1000)] == [t for t in tokens if t >= cutoff]

        # Short duration: both cut-off and expiry apply
        now = to_unix(clock.now())
        assert [t for t in tokens if caa.is_valid(t, 30)] == [t for t in tokens if now - t <= 30]

        caa.revoke(base + 100)
        assert [t for t in tokens if caa.is_valid(t, 30)] == [t for t in tokens if t >= base + 100]

    def test_lock_unlock_round_trips_validity(self, clock):
        """Lock then unlock restores the exact validity of every token."""
        caa = TimeoutCAA(clock=clock)
        tokens = []
        for _ in range(10):
            tokens.append(caa.issue())
            clock.advance(1)
        before = [caa.is_valid(t, 5) for t in tokens]

        caa.lock()
        assert not any(caa.is_valid(t, 5) for t in tokens)

        caa.unlock()
        assert [caa.is_valid(t, 5) for t in tokens] == before


class TestSessionPolicy:
    """SessionPolicy binding a CAA to its window."""

    def test_counter_revoke_all(self):
        """revoke_all on a counter clears the window but new issues work."""
        policy = SessionPolicy(CounterCAA(), 3)
        tokens = [policy.issue() for _ in range(5)]
        assert [t for t in tokens if policy.is_valid(t)] == [2, 3, 4]

        policy.revoke_all()

        assert not any(policy.is_valid(t) for t in tokens)
        assert policy.is_valid(policy.issue()) is True

    def test_timeout_revoke_all(self, clock):
        """revoke_all on a timeout CAA cuts off everything issued before now."""
        policy = SessionPolicy(TimeoutCAA(clock=clock), timedelta(minutes=5))
        tokens = []
        for _ in range(3):
            tokens.append(policy.issue())
            clock.advance(10)

        policy.revoke_all()

        assert policy.window == 300
        assert not any(policy.is_valid(t) for t in tokens)
        assert policy.is_valid(policy.issue()) is True

    def test_lock_and_unlock(self):
        """Policy lock refuses tokens until unlocked."""
        policy = SessionPolicy(CounterCAA(), 2)
        token = policy.issue()

        policy.lock()
        assert policy.is_locked() is True
        assert policy.is_valid(token) is False

        policy.unlock()
        assert policy.is_valid(token) is True

    def test_from_settings_counter(self, settings_env):
        """Counter settings build a counter policy with the configured delta."""
        settings = settings_env(caa_strategy="counter", caa_counter_delta=2)

        policy = SessionPolicy.from_settings(settings, value=7)

        assert isinstance(policy.caa, CounterCAA)
        assert policy.window == 2
        assert policy.to_int() == 7
        assert policy.is_timeout is False

    def test_from_settings_timeout(self, settings_env, clock):
        """Timeout settings build a wrapped timeout policy on the given clock."""
        settings = settings_env(caa_strategy="timeout", caa_timeout_seconds=60, caa_thread_safe="true")

        policy = SessionPolicy.from_settings(settings, clock=clock)

        assert policy.window == 60
        assert policy.is_timeout is True
        assert policy.caa.wrapped.clock is clock
        assert policy.has_issued() is False
