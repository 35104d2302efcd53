"""파일 선택용 글롭 매칭.

``**``는 0개 이상의 디렉토리, ``*``와 ``?``는 한 경로 세그먼트 안에서만
매칭된다. ``!``로 시작하는 패턴은 앞선 패턴의 매칭 결과에서 제외한다.
"""

from __future__ import annotations

import functools
import re
from typing import Iterable


@functools.lru_cache(maxsize=256)
def compile_glob(pattern: str) -> re.Pattern[str]:
    """글롭 패턴을 전체 경로 매칭용 정규식으로 변환한다."""
    out: list[str] = []
    i, n = 0, len(pattern)
    while i < n:
        c = pattern[i]
        if c == "*":
            if pattern.startswith("**", i):
                at_start = i == 0 or pattern[i - 1] == "/"
                if at_start and pattern.startswith("**/", i):
                    out.append(r"(?:.*/)?")
                    i += 3
                    continue
                if at_start and i + 2 == n:
                    out.append(r".*")
                    i += 2
                    continue
                out.append(r"[^/]*")
                i += 2
                continue
            out.append(r"[^/]*")
        elif c == "?":
            out.append(r"[^/]")
        elif c == "[":
            end = pattern.find("]", i + 1)
            if end < 0:
                out.append(re.escape(c))
            else:
                body = pattern[i + 1:end]
                if body.startswith("!"):
                    body = "^" + body[1:]
                out.append("[" + body.replace("\\", "\\\\") + "]")
                i = end + 1
                continue
        else:
            out.append(re.escape(c))
        i += 1
    return re.compile("".join(out) + r"\Z")


def matches(path: str, patterns: Iterable[str]) -> bool:
    """경로가 패턴 목록에 매칭되는지 판단한다.

    패턴은 순서대로 적용된다: 일반 패턴은 포함, ``!`` 패턴은 제외.
    """
    matched = False
    for pattern in patterns:
        if pattern.startswith("!"):
            if matched and compile_glob(pattern[1:]).match(path):
                matched = False
        elif not matched and compile_glob(pattern).match(path):
            matched = True
    return matched
