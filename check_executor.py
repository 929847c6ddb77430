import logging
from typing import List, Tuple

from playfab.core.exceptions import (
    ConflictError,
    ServiceError,
    TransportError,
    UnparseableErrorResponse,
)
from playfab.core.logger import setup_logging
from playfab.execution.executor import Call, RequestExecutor

# --- Mocks ---
class MockTransport:
    def __init__(self, outcomes: List):
        self.outcomes = outcomes
        self.call_count = 0

    def send(self, method, url, headers, body, function_name="") -> Tuple[int, bytes]:
        outcome = self.outcomes[min(self.call_count, len(self.outcomes) - 1)]
        self.call_count += 1
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

CALL = Call("POST", "Server", "GetTitleData", b"{}")
URL = "https://ABCD.playfabapi.com/Server/GetTitleData"

# Паузы короткие, чтобы сценарии шли быстро
def make_executor(outcomes):
    transport = MockTransport(outcomes)
    executor = RequestExecutor(
        transport, retry_wait=0.01, logger=logging.getLogger("check_executor")
    )
    return executor, transport

def test_conflict_retry_flow():
    print("\n--- Test 1: Conflict (409) x3 -> 200 ---")
    conflict = (409, b'{"status":"Conflict"}')
    executor, transport = make_executor([conflict, conflict, conflict, (200, b'{"data":{"ok":true}}')])

    body = executor.execute(CALL, URL, {})

    print(f"Call count: {transport.call_count}")
    if transport.call_count == 4 and body == b'{"data":{"ok":true}}':
        print("SUCCESS: 4 attempts made, eventually succeeded.")
    else:
        print(f"FAILED: Expected 4 calls, got {transport.call_count}")

def test_conflict_budget_exhausted():
    print("\n--- Test 2: Conflict forever -> ConflictError after 4 attempts ---")
    executor, transport = make_executor([(409, b'{"status":"Conflict"}')])

    try:
        executor.execute(CALL, URL, {})
        print("FAILED: Should have raised ConflictError")
    except ConflictError:
        if transport.call_count == 4:
            print("SUCCESS: Caught ConflictError after 4 attempts.")
        else:
            print(f"FAILED: Executed {transport.call_count} times! Should be 4.")

def test_unparseable_fail_fast():
    print("\n--- Test 3: Non-JSON error body -> Fail Fast ---")
    executor, transport = make_executor([(502, b"<html>Bad Gateway</html>")])

    try:
        executor.execute(CALL, URL, {})
        print("FAILED: Should have raised UnparseableErrorResponse")
    except UnparseableErrorResponse:
        if transport.call_count == 1:
            print("SUCCESS: Strictly 1 attempt (No retry on unknown failure mode).")
        else:
            print(f"FAILED: Retried {transport.call_count} times!")

def test_unknown_status_fail_fast():
    print("\n--- Test 4: Unknown status -> Fatal ---")
    executor, transport = make_executor([(500, b'{"status":"Unknown"}')])

    try:
        executor.execute(CALL, URL, {})
        print("FAILED: Should have raised ServiceError")
    except ServiceError as e:
        if transport.call_count == 1 and type(e) is ServiceError:
            print("SUCCESS: Fatal ServiceError after 1 attempt.")
        else:
            print(f"FAILED: {type(e).__name__} after {transport.call_count} attempts")

def test_connection_refused_retry():
    print("\n--- Test 5: Connection refused x4 -> TransportError ---")
    executor, transport = make_executor([TransportError("GetTitleData", "Connection refused")])

    try:
        executor.execute(CALL, URL, {})
        print("FAILED: Should have raised TransportError")
    except TransportError:
        if transport.call_count == 4:
            print("SUCCESS: 4 attempts, last TransportError surfaced.")
        else:
            print(f"FAILED: Expected 4 calls, got {transport.call_count}")

def main():
    setup_logging("DEBUG")
    test_conflict_retry_flow()
    test_conflict_budget_exhausted()
    test_unparseable_fail_fast()
    test_unknown_status_fail_fast()
    test_connection_refused_retry()

if __name__ == "__main__":
    main()
