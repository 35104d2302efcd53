"""가상 파일 트리, 빌드 옵션, 경로 구성요소 모델."""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Callable, Iterable

from i18nfanout.errors import ConfigError

if TYPE_CHECKING:
    from i18nfanout.binder import LocaleBinding
    from i18nfanout.utils.config import Config

# locale → namespace → 파싱된 JSON 트리
ResourceStore = dict[str, dict[str, Any]]

_LIST_SPLIT_RE = re.compile(r",|\s+")

TEMPLATE_ENGINES = ("jinja2", "mako", "hamlc", "handlebars", "pybars")
COLLISION_POLICIES = ("error", "overwrite")


def as_list(value: str | Iterable[str] | None) -> list[str]:
    """문자열 또는 문자열 목록을 순서가 보존된 리스트로 정규화한다.

    단일 문자열은 쉼표/공백 기준으로 분리하고 빈 항목은 버린다.
    None은 빈 리스트가 된다.
    """
    if value is None or value is False:
        return []
    if isinstance(value, str):
        return [item for item in _LIST_SPLIT_RE.split(value) if item]
    return [str(item) for item in value]


@dataclass
class FileRecord:
    """가상 파일 하나: 내용 바이트와 열린 메타데이터 맵.

    locale, binding, orig_path, res_store, bootstrap은 팬아웃 엔진이 채운다.
    """
    contents: bytes = b""
    metadata: dict[str, Any] = field(default_factory=dict)
    locale: str | None = None
    binding: LocaleBinding | None = None
    orig_path: str | None = None
    res_store: ResourceStore | None = None
    bootstrap: str | None = None

    def clone(self) -> FileRecord:
        """메타데이터는 얕은 복사, 내용은 참조를 공유하는 사본을 만든다."""
        return replace(self, metadata=dict(self.metadata))

    @property
    def t(self) -> Callable[..., str]:
        return self._require_binding().t

    @property
    def tt(self) -> Callable[..., str]:
        return self._require_binding().tt

    @property
    def tpath(self) -> Callable[..., str]:
        return self._require_binding().tpath

    def _require_binding(self) -> LocaleBinding:
        if self.binding is None:
            raise AttributeError("FileRecord has not been localised")
        return self.binding


# 경로 → FileRecord. 호스트 빌드 파이프라인이 소유한다.
VirtualFileSet = dict[str, FileRecord]


@dataclass(frozen=True)
class PathParts:
    """경로 템플릿 치환에 사용되는 경로 구성요소."""
    file: str
    ext: str
    base: str
    dir: str
    name: str
    locale: str
    hash: str
    query: str

    def as_dict(self) -> dict[str, str]:
        return {
            "file":   self.file,
            "ext":    self.ext,
            "base":   self.base,
            "dir":    self.dir,
            "name":   self.name,
            "locale": self.locale,
            "hash":   self.hash,
            "query":  self.query,
        }


@dataclass(frozen=True)
class LookupResult:
    """번역 조회 결과. resolved가 False이면 value는 미스 표시값이다."""
    value: str
    resolved: bool


@dataclass
class Options:
    """팬아웃 빌드 옵션. 첫 번째 locale이 빌드 기본 로케일이다."""
    locales: list[str]
    pattern: list[str] = field(default_factory=lambda: ["**/*"])
    path_template: str = ":locale/:file"
    namespaces: list[str] = field(default_factory=lambda: ["translations"])
    namespace_path_template: str = "./locales/__lng__/__ns__.json"
    fallback_locale: str | None = None
    front_matter_keys: list[str] = field(default_factory=list)
    template_engine: str = "jinja2"
    helpers_path: str | None = "scripts/i18n-helpers.js"
    on_collision: str = "error"

    def __post_init__(self) -> None:
        self.locales = as_list(self.locales)
        self.pattern = _as_patterns(self.pattern)
        self.namespaces = as_list(self.namespaces)
        self.front_matter_keys = as_list(self.front_matter_keys)
        if self.fallback_locale is False:
            self.fallback_locale = None

    @property
    def default_locale(self) -> str:
        return self.locales[0]

    @property
    def default_namespace(self) -> str:
        return self.namespaces[0]

    @classmethod
    def from_config(cls, config: Config) -> Options:
        """Config에서 옵션을 구성하고 검증한다."""
        options = cls(
            locales=config.get("locales", []),
            pattern=config.get("pattern", ["**/*"]),
            path_template=config.get("path_template", ":locale/:file"),
            namespaces=config.get("namespaces", ["translations"]),
            namespace_path_template=config.get(
                "namespace_path_template", "./locales/__lng__/__ns__.json",
            ),
            fallback_locale=config.get("fallback_locale") or None,
            front_matter_keys=config.get("front_matter_keys", []),
            template_engine=config.get("template_engine", "jinja2"),
            helpers_path=config.get("helpers_path") or None,
            on_collision=config.get("on_collision", "error"),
        )
        options.validate()
        return options

    def validate(self) -> None:
        """옵션 값을 검증한다. 잘못된 값이 있으면 ConfigError를 발생시킨다."""
        if not self.locales:
            raise ConfigError("locales should contain at least one locale")
        if len(set(self.locales)) != len(self.locales):
            raise ConfigError(f"locales should be distinct: {self.locales!r}")
        if not self.pattern:
            raise ConfigError("pattern should be a string or a list of strings")
        if not isinstance(self.path_template, str):
            raise ConfigError("path_template should be a string")
        if not self.namespaces:
            raise ConfigError("namespaces should contain at least one namespace")
        if not isinstance(self.namespace_path_template, str):
            raise ConfigError("namespace_path_template should be a string")
        if self.fallback_locale is not None and self.fallback_locale not in self.locales:
            raise ConfigError(
                f"fallback_locale {self.fallback_locale!r} must be included in locales"
            )
        if self.template_engine not in TEMPLATE_ENGINES:
            raise ConfigError(
                f"template_engine should be one of {', '.join(TEMPLATE_ENGINES)}"
            )
        if self.on_collision not in COLLISION_POLICIES:
            raise ConfigError(
                f"on_collision should be one of {', '.join(COLLISION_POLICIES)}"
            )


def _as_patterns(value: str | Iterable[str] | None) -> list[str]:
    # 글롭 패턴은 공백을 포함할 수 있으므로 분리하지 않는다.
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [str(item) for item in value]
