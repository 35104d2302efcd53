"""로케일 바인딩: 템플릿에 노출되는 t / tt / tpath 함수."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from i18nfanout.models import LookupResult, as_list
from i18nfanout.paths import localised_path
from i18nfanout.translation import TranslationEngine


class TemplateEngineKind(str, enum.Enum):
    """템플릿 엔진의 헬퍼 호출 규약."""
    FLAT = "flat"    # t("key", name="x")
    HASH = "hash"    # t("key", {"hash": {"name": "x"}})

    @classmethod
    def for_engine(cls, engine: str) -> TemplateEngineKind:
        if engine in ("handlebars", "pybars"):
            return cls.HASH
        return cls.FLAT


@dataclass(frozen=True)
class LocaleBinding:
    """(locale, namespace, prefix, path_template)에 고정된 번역 헬퍼 묶음."""
    locale: str
    namespace: str
    prefix: tuple[str, ...]
    path_template: str
    engine: TranslationEngine
    kind: TemplateEngineKind = TemplateEngineKind.FLAT

    def t(self, key: str, options: Mapping[str, Any] | None = None, **kwargs: Any) -> str:
        """로케일이 미리 지정된 번역 함수. options의 locale이 우선한다."""
        return self._lookup(key, self._options(options, kwargs)).value

    def tt(self, key: str, options: Mapping[str, Any] | None = None, **kwargs: Any) -> str:
        """prefix 목록을 순서대로 붙여 조회하고 처음 해석된 값을 반환한다.

        어떤 prefix로도 해석되지 않으면 ``[home,common].key`` 형식의
        표시 문자열을 반환한다.
        """
        opts = self._options(options, kwargs)
        for prefix in self.prefix:
            result = self._lookup(f"{prefix}.{key}", opts)
            if result.resolved:
                return result.value
        return "[" + ",".join(self.prefix) + "]." + key

    def tpath(self, path: str, locale: str | None = None) -> str:
        """경로를 바인딩된 템플릿으로 전개한다. locale 인자가 우선한다."""
        return localised_path(path, self.path_template, locale or self.locale)

    def _options(self, options: Mapping[str, Any] | None, kwargs: Mapping[str, Any]) -> dict[str, Any]:
        merged = dict(options or {})
        merged.update(kwargs)
        # Handlebars 계열은 명명 인자를 hash 필드에 감싸서 넘긴다
        if self.kind is TemplateEngineKind.HASH and isinstance(merged.get("hash"), Mapping):
            named = merged.pop("hash")
            merged.update(named)
        if not merged.get("locale"):
            merged["locale"] = self.locale
        if not merged.get("namespace"):
            merged["namespace"] = self.namespace
        return merged

    def _lookup(self, key: str, options: Mapping[str, Any]) -> LookupResult:
        return self.engine.lookup(options["locale"], key, options)


def bind(
    engine: TranslationEngine,
    locale: str,
    namespace: str,
    prefix: str | Iterable[str] | None = None,
    path_template: str = ":locale/:file",
    template_engine: str = "jinja2",
) -> LocaleBinding:
    """입력을 정규화하여 LocaleBinding을 생성한다."""
    return LocaleBinding(
        locale=locale,
        namespace=namespace,
        prefix=tuple(as_list(prefix)),
        path_template=path_template,
        engine=engine,
        kind=TemplateEngineKind.for_engine(template_engine),
    )
