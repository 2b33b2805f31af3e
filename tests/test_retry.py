from unittest.mock import MagicMock

import pytest

from postman_publisher.errors import UploadError
from postman_publisher.publish.retry import RetryPolicy


class TestRetryPolicy:
    def test_success_first_try_no_sleep(self):
        sleep = MagicMock()
        func = MagicMock(return_value="ok")

        assert RetryPolicy(sleep=sleep).call(func) == "ok"
        func.assert_called_once()
        sleep.assert_not_called()

    def test_linear_backoff_then_success(self):
        sleep = MagicMock()
        func = MagicMock(side_effect=[UploadError(500, "a"), UploadError(500, "b"), UploadError(500, "c"), "ok"])

        assert RetryPolicy(sleep=sleep).call(func) == "ok"
        assert func.call_count == 4
        assert [c.args[0] for c in sleep.call_args_list] == pytest.approx([0.7, 1.4, 2.1])

    def test_exhausted_raises_last_error(self):
        sleep = MagicMock()
        func = MagicMock(side_effect=[UploadError(401, f"denied {i}") for i in range(4)])

        with pytest.raises(UploadError, match="denied 3"):
            RetryPolicy(sleep=sleep).call(func)
        assert func.call_count == 4
        assert sleep.call_count == 3

    def test_unlisted_exception_not_retried(self):
        sleep = MagicMock()
        func = MagicMock(side_effect=ValueError("boom"))

        with pytest.raises(ValueError):
            RetryPolicy(retry_on=(UploadError,), sleep=sleep).call(func)
        func.assert_called_once()

    def test_custom_policy(self):
        policy = RetryPolicy(max_retries=1, base_delay=2.0, sleep=MagicMock())
        assert policy.delay(1) == 2.0
        with pytest.raises(RuntimeError):
            policy.call(MagicMock(side_effect=RuntimeError("x")))
        policy.sleep.assert_called_once_with(2.0)
