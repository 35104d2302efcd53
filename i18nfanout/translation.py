"""번역 조회 엔진.

(파일, 로케일) 단위로 구성된 로컬 리소스 스토어 위에서 키 기반 조회를
수행한다. 프로세스 전역 상태를 읽지 않는다.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Mapping

from i18nfanout.models import LookupResult, ResourceStore

logger = logging.getLogger("i18nfanout.translation")

NS_SEPARATOR  = ":"
KEY_SEPARATOR = "."


class TranslationEngine:
    """리소스 스토어를 조회하고 보간을 수행하는 엔진."""

    def __init__(
        self,
        store: ResourceStore,
        default_namespace: str,
        fallback_locale: str | None = None,
        interpolation_prefix: str = "{{",
        interpolation_suffix: str = "}}",
    ) -> None:
        self._store = store
        self.default_namespace = default_namespace
        self.fallback_locale = fallback_locale
        self._var_re = re.compile(
            re.escape(interpolation_prefix) + r"(.+?)" + re.escape(interpolation_suffix)
        )

    def has_bundle(self, locale: str, namespace: str) -> bool:
        return namespace in self._store.get(locale, {})

    def lookup(
        self,
        locale: str,
        key: str,
        options: Mapping[str, Any] | None = None,
    ) -> LookupResult:
        """키를 조회한다.

        Args:
            locale: 대상 로케일.
            key: 번역 키. ``ns:a.b`` 형식이면 네임스페이스를 지정한다.
            options: namespace, default_value, join_arrays 및 보간 변수.

        Returns:
            LookupResult. 미스이면 resolved=False이고 value는
            default_value 또는 키 자체이다.
        """
        options = dict(options or {})
        namespace = options.get("namespace") or self.default_namespace
        path = key
        if NS_SEPARATOR in key:
            ns, _, rest = key.partition(NS_SEPARATOR)
            if ns and rest:
                namespace, path = ns, rest

        candidates = [locale]
        if self.fallback_locale and self.fallback_locale != locale:
            candidates.append(self.fallback_locale)

        for candidate in candidates:
            value = self._resolve(candidate, namespace, path)
            if isinstance(value, list) and options.get("join_arrays") is not None:
                value = str(options["join_arrays"]).join(str(v) for v in value)
            if isinstance(value, str):
                return LookupResult(self._interpolate(value, options), True)

        logger.debug("Missing key %s:%s for locale %s", namespace, path, locale)
        default = options.get("default_value")
        if default is not None:
            return LookupResult(self._interpolate(str(default), options), False)
        return LookupResult(key, False)

    def translate(self, locale: str, key: str, **kwargs: Any) -> str:
        """lookup의 결과 문자열만 반환하는 단축 메서드."""
        return self.lookup(locale, key, kwargs).value

    def _resolve(self, locale: str, namespace: str, path: str) -> Any:
        # 중첩 키 접근 (dot notation)
        val: Any = self._store.get(locale, {}).get(namespace)
        for part in path.split(KEY_SEPARATOR):
            if isinstance(val, dict) and part in val:
                val = val[part]
            else:
                return None
        return val

    def _interpolate(self, value: str, options: Mapping[str, Any]) -> str:
        # 없는 변수는 빈 문자열로 치환
        def _replace(match: re.Match) -> str:
            return str(options.get(match.group(1).strip(), ""))

        return self._var_re.sub(_replace, value)
