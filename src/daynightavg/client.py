# OOP boundary for external i/o
# all http/keys/retries for talking to a deployed endpoint live here
# use a thread-local session so one client can be shared across worker threads

from __future__ import annotations
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, Any, List, Optional, Tuple
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry
from .config import endpoint_from_env, function_key_from_env

class TemperatureAverageAPIError(RuntimeError):
    # single error type used to propagate clear messages from this layer
    pass

class TemperatureAverageClient:
    # this class encapsulates endpoint details like url, function key, retries
    DEFAULT_TIMEOUT = 10.0
    FUNCTION_KEY_HEADER = "x-functions-key"

    def __init__(
        self,
        endpoint: Optional[str] = None,
        function_key: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = 3,
        backoff_factor: float = 0.5,
        user_agent: str = "daynightavg/0.1",
    ):
        self.endpoint = endpoint or endpoint_from_env()
        if not self.endpoint:
            # fail when the url is missing to avoid confusing downstream errors
            raise TemperatureAverageAPIError("DAYNIGHT_ENDPOINT not set")

        self.function_key = function_key or function_key_from_env()
        self.timeout = timeout
        self.user_agent = user_agent

        # each worker thread lazily obtains its own session through _session()
        self._local = threading.local()

        # POST is retried too, the endpoint is a pure function of its body
        self._retry = Retry(
            total=max_retries,
            backoff_factor=backoff_factor,
            status_forcelist=(429, 500, 502, 503, 504),
            allowed_methods=("POST",),
            raise_on_status=False,
        )

    def _build_session(self) -> requests.Session:
        s = requests.Session()
        s.headers.update({"User-Agent": self.user_agent, "Accept": "application/json"})
        if self.function_key:
            s.headers[self.FUNCTION_KEY_HEADER] = self.function_key
        adapter = HTTPAdapter(max_retries=self._retry)
        s.mount("http://", adapter)
        s.mount("https://", adapter)
        return s

    def _session(self) -> requests.Session:
        sess = getattr(self._local, "session", None)
        if sess is None:
            sess = self._build_session()
            self._local.session = sess
        return sess

    def average(self, text: str) -> Dict[str, Any]:
        # post raw text and validate the minimal response shape
        try:
            resp = self._session().post(
                self.endpoint,
                data=text.encode("utf-8"),
                headers={"Content-Type": "text/plain; charset=utf-8"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise TemperatureAverageAPIError(f"Request error for {self.endpoint!r}: {exc}") from exc

        if resp.status_code >= 400:
            # include a short response snippet to speed up triage
            snippet = (resp.text or "")[:300]
            raise TemperatureAverageAPIError(f"HTTP {resp.status_code} from {self.endpoint!r}. Body: {snippet}")

        try:
            data = resp.json()
        except ValueError as exc:
            raise TemperatureAverageAPIError(f"Invalid JSON from {self.endpoint!r}: {exc}") from exc

        if not isinstance(data, dict) or "dayAvg" not in data or "nightAvg" not in data:
            raise TemperatureAverageAPIError("Unexpected API shape: missing dayAvg/nightAvg")

        return data

# one client shared by all workers, each worker has its own thread local http session
def average_all(texts: Dict[str, str], client: Optional[TemperatureAverageClient] = None,
                max_workers: int = 3) -> List[Tuple[str, Dict[str, Any]]]:
    client = client or TemperatureAverageClient()
    results: List[Tuple[str, Dict[str, Any]]] = []

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures = {pool.submit(client.average, text): name for name, text in texts.items()}
        for fut in as_completed(futures):
            # allow exceptions to propagate, the cli reports them
            results.append((futures[fut], fut.result()))

    # keep the caller's ordering so output is deterministic
    order = {name: i for i, name in enumerate(texts)}
    return sorted(results, key=lambda r: order[r[0]])
