"""
On-ledger reputation bonus.

A probe is any callable taking an identity and returning a ProbeResult.
Failure is a value (ProbeResult.unavailable), not an exception: whatever
goes wrong inside a probe, ranking sees a score of 0 and moves on.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

import requests

from .logger import get_logger
from .normalize import format_address
from .retry import CircuitBreaker, CircuitOpenError, RetryError, exponential_backoff

logger = get_logger()

TX_SATURATION = 50
BALANCE_SATURATION = 10.0
WEI_PER_NATIVE = 10 ** 18


class ProbeError(Exception):
    """Raised for a malformed or failed ledger RPC response."""
    pass


@dataclass(frozen=True)
class ProbeResult:
    ok: bool
    transaction_count: int = 0
    native_balance: float = 0.0
    error: Optional[str] = None

    @classmethod
    def success(cls, transaction_count: int, native_balance: float) -> "ProbeResult":
        return cls(ok=True, transaction_count=transaction_count, native_balance=native_balance)

    @classmethod
    def unavailable(cls, reason: str) -> "ProbeResult":
        return cls(ok=False, error=reason)


ProbeFn = Callable[[str], ProbeResult]


def reputation_score(result: ProbeResult) -> float:
    """Average of transaction and balance saturation; 0 when unavailable."""
    if not result.ok:
        return 0.0
    tx_score = min(max(result.transaction_count, 0) / TX_SATURATION, 1.0)
    balance_score = min(max(result.native_balance, 0.0) / BALANCE_SATURATION, 1.0)
    return (tx_score + balance_score) / 2


def safe_probe(probe: ProbeFn, identity: str) -> ProbeResult:
    """Call a probe, turning any exception or bad return into 'unavailable'."""
    logger.record_probe_call()
    try:
        result = probe(identity)
    except Exception as e:
        result = ProbeResult.unavailable(f"{type(e).__name__}: {e}")
    if not isinstance(result, ProbeResult):
        result = ProbeResult.unavailable(f"unexpected probe response: {type(result).__name__}")

    if not result.ok:
        logger.record_probe_failure()
        logger.warning(
            "Reputation probe unavailable",
            identity=format_address(identity),
            reason=result.error,
        )
    return result


def parse_quantity(value: Any) -> int:
    """Decode a JSON-RPC hex quantity such as '0x1a'."""
    if not isinstance(value, str) or not value.lower().startswith("0x"):
        raise ProbeError(f"Invalid hex quantity: {value!r}")
    try:
        return int(value, 16)
    except ValueError:
        raise ProbeError(f"Invalid hex quantity: {value!r}")


class LedgerProbe:
    """
    Reputation probe backed by an Ethereum-style JSON-RPC endpoint.

    Reads the account's transaction count and native balance at the latest
    block. Timeouts and connection errors are retried with backoff; a
    circuit breaker refuses calls once the endpoint keeps failing.
    """

    def __init__(
        self,
        rpc_url: str,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
        breaker: Optional[CircuitBreaker] = None,
        max_retries: int = 2,
        retry_delay: float = 0.5,
    ):
        self.rpc_url = rpc_url
        self.timeout = timeout
        self.session = session or requests.Session()
        self.breaker = breaker or CircuitBreaker(failure_threshold=5, recovery_timeout=60)
        self._request_id = 0
        self._post = exponential_backoff(
            max_retries=max_retries,
            base_delay=retry_delay,
            exceptions=(requests.exceptions.Timeout, requests.exceptions.ConnectionError),
        )(self._post_once)

    def __call__(self, identity: str) -> ProbeResult:
        try:
            return self.breaker.call(self._fetch, identity)
        except CircuitOpenError as e:
            return ProbeResult.unavailable(str(e))
        except (RetryError, ProbeError, requests.exceptions.RequestException) as e:
            return ProbeResult.unavailable(f"{type(e).__name__}: {e}")

    def _fetch(self, identity: str) -> ProbeResult:
        tx_count = parse_quantity(self.rpc("eth_getTransactionCount", [identity, "latest"]))
        balance_wei = parse_quantity(self.rpc("eth_getBalance", [identity, "latest"]))
        return ProbeResult.success(tx_count, balance_wei / WEI_PER_NATIVE)

    def rpc(self, method: str, params: List[Any]) -> Any:
        """Perform one JSON-RPC call and return its 'result' member."""
        self._request_id += 1
        payload = {"jsonrpc": "2.0", "id": self._request_id, "method": method, "params": params}
        resp = self._post(payload)
        if resp.status_code != 200:
            raise ProbeError(f"{method} failed: HTTP {resp.status_code}")
        try:
            body: Dict[str, Any] = resp.json()
        except ValueError:
            raise ProbeError(f"{method} returned non-JSON body")
        if not isinstance(body, dict):
            raise ProbeError(f"{method} returned unexpected body")
        if body.get("error"):
            error = body["error"]
            message = error.get("message") if isinstance(error, dict) else error
            raise ProbeError(f"{method} error: {message}")
        if "result" not in body:
            raise ProbeError(f"{method} response has no result")
        return body["result"]

    def _post_once(self, payload: Dict[str, Any]) -> requests.Response:
        return self.session.post(self.rpc_url, json=payload, timeout=self.timeout)
