"""版本选择

yanked 版本始终排除；预发布版本仅在 allow_prerelease 时参与；
其余按语义化版本优先级取最大值。版本相同时保留哪一条不作保证。
"""

from __future__ import annotations

from collections.abc import Iterable

from cratefetch.core.exceptions import NoVersionsAvailableError
from cratefetch.core.models import Dependency, VersionRecord


def select_latest(records: Iterable[VersionRecord], allow_prerelease: bool = False) -> Dependency:
    candidates = [
        r for r in records
        if not r.yanked and (allow_prerelease or not r.is_prerelease)
    ]
    if not candidates:
        raise NoVersionsAvailableError()
    latest = max(candidates, key=lambda r: r.version)
    return Dependency(name=latest.name, version=str(latest.version))
