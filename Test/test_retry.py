import pytest

from Utils.retry import RetryPolicy, retry_request


class TestRetryPolicy:

    def test_exponential_delay_without_jitter(self):
        policy = RetryPolicy(max_attempts=5, base_delay=5.0)
        assert [policy.delay_for(a) for a in (1, 2, 3)] == [10.0, 20.0, 40.0]

    def test_jitter_stays_within_bounds(self):
        policy = RetryPolicy(max_attempts=3, base_delay=5.0, jitter=5.0)
        for _ in range(50):
            assert 10.0 <= policy.delay_for(1) <= 15.0


class TestRetryRequest:

    def test_returns_after_transient_failures(self):
        calls = []
        sleeps = []

        def flaky():
            calls.append(1)
            if len(calls) < 3:
                raise ConnectionError("boom")
            return "ok"

        result = retry_request(flaky, RetryPolicy(max_attempts=3, base_delay=1.0), sleep=sleeps.append)

        assert result == "ok"
        assert len(calls) == 3
        assert sleeps == [2.0, 4.0]

    def test_reraises_last_error_without_final_sleep(self):
        sleeps = []

        def always_fails():
            raise TimeoutError("still down")

        with pytest.raises(TimeoutError, match="still down"):
            retry_request(always_fails, RetryPolicy(max_attempts=2, base_delay=1.0), sleep=sleeps.append)

        assert sleeps == [2.0]
