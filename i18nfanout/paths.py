"""경로 템플릿 엔진.

경로를 구성요소(PathParts)로 분해하고, ``:locale/:file`` 같은 템플릿을
대상 로케일에 대해 전개한다. 모든 함수는 순수 함수이다.

사용 가능한 토큰 (경로 ``/folder/file.html?x=1#top``, 로케일 ``en`` 기준):

    :file    folder/file.html?x=1#top   (입력 원문 그대로)
    :ext     .html
    :base    file.html
    :dir     folder
    :name    file
    :locale  en
    :hash    #top
    :query   ?x=1
"""

from __future__ import annotations

import functools
import logging
import re

from i18nfanout.models import PathParts

logger = logging.getLogger("i18nfanout.paths")

TOKENS = ("file", "ext", "base", "dir", "name", "locale", "hash", "query")

_TOKEN_RE     = re.compile(r":(" + "|".join(TOKENS) + r")(?!\w)")
_ANY_TOKEN_RE = re.compile(r":([A-Za-z_]\w*)")
_SLASHES_RE   = re.compile(r"/{2,}")


def file_parts(path: str, locale: str) -> PathParts:
    """경로를 구성요소로 분해한다.

    hash는 마지막 ``#``부터, query는 남은 문자열의 첫 ``?``부터 잘라낸다.
    ``file``은 항상 호출자가 넘긴 원문 그대로이다.
    """
    rest = path

    hash_ = ""
    idx = rest.rfind("#")
    if idx >= 0:
        hash_ = rest[idx:]
        rest  = rest[:idx]

    query = ""
    idx = rest.find("?")
    if idx >= 0:
        query = rest[idx:]
        rest  = rest[:idx]

    dir_, _, base = rest.rpartition("/")

    idx = base.rfind(".")
    if idx >= 0:
        name, ext = base[:idx], base[idx:]
    else:
        name, ext = base, ""

    return PathParts(
        file=path,
        ext=ext,
        base=base,
        dir=dir_,
        name=name,
        locale=locale,
        hash=hash_,
        query=query,
    )


@functools.lru_cache(maxsize=64)
def _report_unknown_tokens(template: str) -> tuple[str, ...]:
    """알 수 없는 토큰을 템플릿당 한 번만 로그로 남긴다. 치환되지 않고 그대로 남는다."""
    unknown = tuple(
        m.group(0) for m in _ANY_TOKEN_RE.finditer(template)
        if m.group(1) not in TOKENS
    )
    for token in unknown:
        logger.debug("Path template %r: token %s has no matching part", template, token)
    return unknown


def expand(template: str, parts: PathParts) -> str:
    """템플릿의 ``:token``을 구성요소 값으로 치환한다. 슬래시 정규화는 하지 않는다."""
    _report_unknown_tokens(template)
    values = parts.as_dict()
    return _TOKEN_RE.sub(lambda m: values[m.group(1)], template)


def localised_path(path: str, template: str, locale: str) -> str:
    """경로를 로케일별 경로로 전개한다.

    절대 경로("/"로 시작)는 결과도 정확히 하나의 "/"로 시작한다.
    상대 경로는 빈 ``:dir`` 때문에 생긴 선행 "/"를 제거한다.
    """
    is_absolute = path.startswith("/")
    relative = path[1:] if is_absolute else path

    result = expand(template, file_parts(relative, locale))
    result = _SLASHES_RE.sub("/", result)
    if result != "/" and result.endswith("/"):
        result = result[:-1]

    if is_absolute:
        if not result.startswith("/"):
            result = "/" + result
    elif result != "/" and result.startswith("/"):
        result = result[1:]
    return result


class PathTemplate:
    """템플릿과 기본 로케일이 고정된 경로 전개기."""

    def __init__(self, template: str, default_locale: str) -> None:
        self.template = template
        self.default_locale = default_locale

    def parts(self, path: str, locale: str | None = None) -> PathParts:
        return file_parts(path, locale or self.default_locale)

    def expand(self, path: str, locale: str | None = None) -> str:
        return localised_path(path, self.template, locale or self.default_locale)

    __call__ = expand

    def __repr__(self) -> str:
        return f"<PathTemplate {self.template!r} locale={self.default_locale!r}>"
