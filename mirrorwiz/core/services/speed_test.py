"""
Speed test — average HTTP HEAD latency per mirror.

Any HTTP response counts as reachable, including 4xx/5xx (many mirrors
reject HEAD on their root). Connection errors and timeouts count as a
failed attempt. Probes run sequentially.
"""

from __future__ import annotations

import logging
import time
import urllib.error
import urllib.request
from dataclasses import dataclass, field
from typing import Callable

from mirrorwiz.core.registry import get_tool

logger = logging.getLogger(__name__)

DEFAULT_ATTEMPTS = 3
DEFAULT_TIMEOUT = 5.0
USER_AGENT = "mirrorwiz/0.1"

Opener = Callable[..., object]


def probe_latency(
    url: str,
    attempts: int = DEFAULT_ATTEMPTS,
    timeout: float = DEFAULT_TIMEOUT,
    opener: Opener | None = None,
    clock: Callable[[], float] = time.perf_counter,
) -> int | None:
    """Average round-trip time of ``attempts`` HEAD requests, in ms.

    Args:
        url: URL to probe.
        attempts: Number of requests.
        timeout: Per-request timeout in seconds.
        opener: ``urlopen``-compatible callable. Tests pass a fake.
        clock: Monotonic clock in seconds.

    Returns:
        Rounded average over successful attempts, or ``None`` if all failed.
    """
    opener = opener or urllib.request.urlopen
    timings: list[float] = []

    for attempt in range(1, attempts + 1):
        req = urllib.request.Request(
            url, method="HEAD",
            headers={"User-Agent": USER_AGENT},
        )
        start = clock()
        try:
            with opener(req, timeout=timeout):
                pass
        except urllib.error.HTTPError as e:
            e.close()
        except (urllib.error.URLError, OSError) as e:
            logger.debug("Probe %d/%d of %s failed: %s", attempt, attempts, url, e)
            continue
        timings.append((clock() - start) * 1000)

    if not timings:
        return None
    return round(sum(timings) / len(timings))


@dataclass
class MirrorLatency:
    mirror: str
    name: str
    url: str
    latency_ms: int | None
    fastest: bool = False

    def to_dict(self) -> dict:
        return {
            "mirror": self.mirror,
            "name": self.name,
            "url": self.url,
            "latency_ms": self.latency_ms,
            "fastest": self.fastest,
        }


@dataclass
class SpeedTestResult:
    tool: str
    results: list[MirrorLatency] = field(default_factory=list)

    @property
    def fastest(self) -> MirrorLatency | None:
        return next((r for r in self.results if r.fastest), None)

    def to_dict(self) -> dict:
        fastest = self.fastest
        return {
            "tool": self.tool,
            "fastest": fastest.mirror if fastest else None,
            "results": [r.to_dict() for r in self.results],
        }


def probe_tool(
    tool_key: str,
    attempts: int = DEFAULT_ATTEMPTS,
    timeout: float = DEFAULT_TIMEOUT,
    opener: Opener | None = None,
) -> SpeedTestResult:
    """Probe every mirror of a tool and mark the fastest reachable one.

    Raises:
        RegistryLookupError: Unknown tool key.
    """
    tool = get_tool(tool_key)
    result = SpeedTestResult(tool=tool_key)
    for mirror in tool.mirrors().values():
        latency = probe_latency(mirror.test_url, attempts, timeout, opener)
        logger.info("%s/%s: %s", tool_key, mirror.key,
                    f"{latency} ms" if latency is not None else "unreachable")
        result.results.append(MirrorLatency(
            mirror=mirror.key, name=mirror.name, url=mirror.test_url, latency_ms=latency,
        ))

    reachable = [r for r in result.results if r.latency_ms is not None]
    if reachable:
        min(reachable, key=lambda r: r.latency_ms).fastest = True
    return result
