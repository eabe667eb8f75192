"""
Tests for the template cache (get-or-build, one build in flight per template).
"""

import logging
import threading
import time

import pytest
from anatomy_lib.core.errors import DanglingBridge
from anatomy_lib.cache.template_cache import TemplateCache


class CountingLoader:
    """Template loader that records how often each template was loaded."""

    def __init__(self, templates, delay=0.0):
        self.templates = templates
        self.delay = delay
        self.calls = {}
        self._lock = threading.Lock()

    def __call__(self, name):
        with self._lock:
            self.calls[name] = self.calls.get(name, 0) + 1
        if self.delay:
            time.sleep(self.delay)
        return self.templates[name]


@pytest.fixture
def dangling_template(chain_template):
    broken = {
        "arterial": [{"id": "A", "regions": ["Body"], "bridges": ["V9"]}],
        "venous": chain_template["venous"],
    }
    return broken


def test_get_or_build_shares_graph(chain_template, circulation_type):
    loader = CountingLoader({"human": chain_template})
    cache = TemplateCache(loader, circulation_type)

    first = cache.get_or_build("human")
    second = cache.get_or_build("human")

    assert first is second
    assert first.name == "human"
    assert loader.calls == {"human": 1}
    assert cache.build_count("human") == 1
    assert "human" in cache
    assert len(cache) == 1
    assert cache.names() == ("human",)


def test_concurrent_requests_build_once(chain_template, circulation_type):
    """Requests arriving while a build is in flight wait for that build."""
    loader = CountingLoader({"human": chain_template}, delay=0.2)
    cache = TemplateCache(loader, circulation_type)
    barrier = threading.Barrier(8)
    results = []
    results_lock = threading.Lock()

    def worker():
        barrier.wait()
        graph = cache.get_or_build("human")
        with results_lock:
            results.append(graph)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=10)

    assert len(results) == 8
    assert all(graph is results[0] for graph in results)
    assert loader.calls == {"human": 1}
    assert cache.build_count("human") == 1


def test_concurrent_failure_reaches_every_waiter(dangling_template, circulation_type):
    loader = CountingLoader({"broken": dangling_template}, delay=0.2)
    cache = TemplateCache(loader, circulation_type)
    barrier = threading.Barrier(4)
    errors = []
    errors_lock = threading.Lock()

    def worker():
        barrier.wait()
        try:
            cache.get_or_build("broken")
        except DanglingBridge as e:
            with errors_lock:
                errors.append(e)

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=10)

    assert len(errors) == 4
    assert "broken" not in cache


def test_failed_build_not_cached(dangling_template, circulation_type):
    cache = TemplateCache(CountingLoader({"broken": dangling_template}), circulation_type)

    with pytest.raises(DanglingBridge):
        cache.get_or_build("broken")
    with pytest.raises(DanglingBridge):
        cache.get_or_build("broken")

    assert cache.build_count("broken") == 2
    assert len(cache) == 0


def test_loader_error_propagates(circulation_type):
    cache = TemplateCache(CountingLoader({}), circulation_type)

    with pytest.raises(KeyError):
        cache.get_or_build("missing")

    assert "missing" not in cache


def test_loader_requesting_own_template_raises(chain_template, circulation_type):
    """A loader that asks the cache for the template it is loading fails fast."""
    cache = None

    def loader(name):
        cache.get_or_build(name)
        return chain_template

    cache = TemplateCache(loader, circulation_type)

    with pytest.raises(RuntimeError, match="requested again"):
        cache.get_or_build("human")
    with pytest.raises(RuntimeError):
        cache.get_or_build("human")

    assert "human" not in cache
    assert cache.build_count("human") == 2


def test_loader_may_request_other_templates(chain_template, circulation_type):
    templates = {"base": chain_template}
    cache = None

    def loader(name):
        if name == "derived":
            return cache.get_or_build("base").spec_dict()
        return templates[name]

    cache = TemplateCache(loader, circulation_type)
    derived = cache.get_or_build("derived")

    assert derived.name == "derived"
    assert cache.names() == ("base", "derived")
    assert derived.to_dict()["nodes"] == cache.get("base").to_dict()["nodes"]


def test_evict_and_rebuild(chain_template, circulation_type):
    cache = TemplateCache(CountingLoader({"human": chain_template}), circulation_type)
    first = cache.get_or_build("human")

    assert cache.evict("human") is True
    assert cache.evict("human") is False
    assert cache.get("human") is None

    second = cache.get_or_build("human")
    assert second is not first
    assert second.to_dict() == first.to_dict()
    assert cache.build_count("human") == 2
    # an evicted graph stays usable by its holders
    assert first.downstream("C") == {"V1"}


def test_clear(chain_template, circulation_type):
    templates = {"a": chain_template, "b": chain_template}
    cache = TemplateCache(CountingLoader(templates), circulation_type)
    cache.get_or_build("a")
    cache.get_or_build("b")

    cache.clear()

    assert len(cache) == 0
    assert cache.names() == ()


def test_cache_logs_builds(chain_template, circulation_type, caplog):
    cache = TemplateCache(CountingLoader({"human": chain_template}), circulation_type)

    with caplog.at_level(logging.INFO, logger="anatomy_lib.cache.template_cache"):
        cache.get_or_build("human")
        cache.evict("human")

    messages = [r.getMessage() for r in caplog.records]
    assert any("Built template 'human'" in m for m in messages)
    assert any("Evicted template 'human'" in m for m in messages)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
