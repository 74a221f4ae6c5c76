"""Benchmark: bulk request and filter throughput.

Measures how many bulk requests can be serialized, loaded and validated
per second, and how many filter evaluations complete per second, using
the public scimbulk APIs.
"""
from __future__ import annotations

import json
import sys
import time
from collections.abc import Callable
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import scimbulk
from scimbulk import BulkOperation, BulkRequest
from scimbulk.filters import FilterEvaluator, and_, co, eq, gt, or_, pr

_ITERATIONS: int = 2_000
_FILTER_ITERATIONS: int = 20_000
_OPERATIONS_PER_REQUEST: int = 50

_RESOURCE = {
    "userName": "bjensen",
    "active": True,
    "emails": [{"value": "bjensen@example.com", "type": "work"}],
    "meta": {"created": "2011-08-01T18:29:49Z"},
}


def _sample_request() -> BulkRequest:
    request = BulkRequest(failure_count=1)
    for i in range(_OPERATIONS_PER_REQUEST // 2):
        request.append(
            BulkOperation.post("/Users", {"userName": f"user{i}"}).with_bulk_id(f"u{i}"),
            BulkOperation.post("/Groups", {
                "displayName": f"group{i}",
                "members": [{"type": "User", "value": f"bulkId:u{i}"}],
            }).with_bulk_id(f"g{i}"),
        )
    return request


def _run(operation: str, iterations: int, fn: Callable[[], object]) -> dict[str, object]:
    start = time.perf_counter()
    for _ in range(iterations):
        fn()
    total = time.perf_counter() - start

    result: dict[str, object] = {
        "operation": operation,
        "iterations": iterations,
        "total_seconds": round(total, 4),
        "ops_per_second": round(iterations / total, 1),
        "avg_latency_ms": round(total / iterations * 1000, 4),
    }
    print(
        f"[bench_throughput] {result['operation']}: "
        f"{result['ops_per_second']:,.0f} ops/sec  "
        f"avg {result['avg_latency_ms']:.4f} ms"
    )
    return result


def bench_bulk_round_trip() -> dict[str, object]:
    """Serialize a 50-operation request to JSON and load it back."""
    request = _sample_request()
    return _run(
        "bulk_json_round_trip",
        _ITERATIONS,
        lambda: scimbulk.loads(scimbulk.dumps(request, indent=None)),
    )


def bench_bulk_validate() -> dict[str, object]:
    """Run every structural rule over a 50-operation request."""
    request = _sample_request()
    return _run("bulk_validate", _ITERATIONS, lambda: scimbulk.validate(request))


def bench_filter_evaluate() -> dict[str, object]:
    """Match a small compound filter against one resource."""
    node = and_(
        eq("active", True),
        or_(co("emails", "example.com"), pr("phoneNumbers")),
        gt("meta.created", "2011-05-13T04:42:34Z"),
    )
    evaluator = FilterEvaluator()
    return _run(
        "filter_evaluate", _FILTER_ITERATIONS, lambda: evaluator.matches(node, _RESOURCE)
    )


if __name__ == "__main__":
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)

    for bench_fn, fname in [
        (bench_bulk_round_trip, "bulk_round_trip_baseline.json"),
        (bench_bulk_validate, "bulk_validate_baseline.json"),
        (bench_filter_evaluate, "filter_evaluate_baseline.json"),
    ]:
        result = bench_fn()
        output_path = results_dir / fname
        with open(output_path, "w", encoding="utf-8") as fh:
            json.dump(result, fh, indent=2)
        print(f"Results saved to {output_path}")
