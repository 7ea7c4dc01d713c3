"""Tests for the engine tracer decorator."""

from production_engines.tracer import compute_input_fingerprint, traced_engine


class TestFingerprint:

    def test_deterministic_and_order_independent(self):
        a = compute_input_fingerprint(("stock",), {"stock": {"x": 1, "y": 2}})
        b = compute_input_fingerprint(("stock",), {"stock": {"y": 2, "x": 1}})
        assert a == b
        assert len(a) == 16

    def test_sensitive_to_values(self):
        a = compute_input_fingerprint(("qty",), {"qty": 1})
        b = compute_input_fingerprint(("qty",), {"qty": 2})
        assert a != b

    def test_missing_field_recorded_as_null(self):
        assert compute_input_fingerprint(("qty",), {}) == compute_input_fingerprint(
            ("qty",), {"qty": None},
        )


class TestTracedEngine:

    def test_result_passed_through_and_traced(self, captured_logs):
        @traced_engine("doubler", "2.1", fingerprint_fields=("value",))
        def double(value):
            return value * 2

        assert double(value=21) == 42

        trace = [r for r in captured_logs() if r["message"] == "ENGINE_TRACE"][-1]
        assert trace["engine_name"] == "doubler"
        assert trace["engine_version"] == "2.1"
        assert trace["function"].endswith("double")
        assert trace["duration_ms"] >= 0
