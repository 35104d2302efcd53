"""클라이언트 측 i18n 초기화 설정 직렬화."""

from __future__ import annotations

import json
from typing import Any, Iterable

from i18nfanout.models import ResourceStore


def client_config(
    locale: str,
    namespaces: Iterable[str],
    default_namespace: str,
    prefix: Iterable[str],
    path_template: str,
    res_store: ResourceStore,
    fallback_locale: str | None = None,
) -> dict[str, Any]:
    """한 (파일, 로케일) 쌍의 클라이언트 설정 dict를 만든다.

    fallback_locale이 있으면 그 번들도 resStore에 실려 있으므로
    fallbackLng와 preload에 함께 기록한다.
    """
    preload = [locale]
    if fallback_locale and fallback_locale != locale:
        preload.append(fallback_locale)
    return {
        "lng":         locale,
        "ns":          list(namespaces),
        "defaultNs":   default_namespace,
        "preload":     preload,
        "getAsync":    False,
        "fallbackLng": fallback_locale or False,
        "prefix":      list(prefix),
        "path":        path_template,
        "resStore":    res_store,
    }


def bootstrap(config: dict[str, Any]) -> str:
    """설정을 <script> 안에 넣을 수 있는 JSON 문자열로 직렬화한다."""
    return json.dumps(config, ensure_ascii=False, sort_keys=True).replace("</", "<\\/")
