"""
Tests for filename/page path resolution and collision detection.
"""

from __future__ import annotations

from mirrorwiz.core.registry import iter_combinations
from mirrorwiz.core.services.paths import (
    colliding_combinations,
    find_collisions,
    normalize_os_version,
    page_path,
    script_file_name,
)


class TestNaming:
    def test_normalize(self):
        assert normalize_os_version("ubuntu-22.04") == "ubuntu2204"
        assert normalize_os_version("centos-stream-9") == "centosstream9"

    def test_unversioned(self):
        assert script_file_name("npm", "aliyun") == "npm-aliyun.sh"
        assert page_path("npm", "aliyun") == "/tools/npm/aliyun/"

    def test_versioned(self):
        assert script_file_name("apt", "aliyun", "debian-12") == "apt-debian12-aliyun.sh"
        assert page_path("apt", "aliyun", "debian-12") == "/tools/apt/debian-12/aliyun/"

    def test_empty_os_treated_as_none(self):
        assert script_file_name("npm", "aliyun", "") == "npm-aliyun.sh"


class TestCollisions:
    def test_registry_is_injective(self):
        combos = [(t.key, m, o) for t, m, o in iter_combinations()]
        assert find_collisions(combos) == []
        names = {script_file_name(*c) for c in combos}
        pages = {page_path(*c) for c in combos}
        assert len(names) == len(combos)
        assert len(pages) == len(combos)

    def test_lossy_normalization_detected(self):
        combos = [
            ("apt", "aliyun", "ubuntu-22.04"),
            ("apt", "aliyun", "ubuntu-2-204"),
            ("apt", "aliyun", "debian-12"),
        ]
        collisions = find_collisions(combos)
        assert len(collisions) == 1
        assert collisions[0].kind == "filename"
        assert collisions[0].target == "apt-ubuntu2204-aliyun.sh"
        assert colliding_combinations(collisions) == set(combos[:2])

    def test_page_path_collision(self):
        combos = [("npm", "aliyun", None), ("npm", "aliyun", None)]
        kinds = {c.kind for c in find_collisions(combos)}
        assert kinds == {"filename", "page_path"}

    def test_to_dict(self):
        collision = find_collisions([("a", "m", None), ("a", "m", None)])[0]
        d = collision.to_dict()
        assert d["target"] == "a-m.sh"
        assert d["combinations"][0] == {"tool": "a", "mirror": "m", "os": None}
