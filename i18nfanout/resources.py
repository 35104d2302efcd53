"""네임스페이스 리소스 로더.

파일에 필요한 네임스페이스 목록을 결정하고, (locale, namespace)별 번들을
로드해 호출 단위의 로컬 리소스 스토어를 만든다.
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any, Iterable, Mapping, Protocol

from i18nfanout.errors import ResourceLoadError
from i18nfanout.models import FileRecord, Options, ResourceStore, as_list
from i18nfanout.utils.aio import gather_or_cancel

logger = logging.getLogger("i18nfanout.resources")

LOCALE_PLACEHOLDER    = "__lng__"
NAMESPACE_PLACEHOLDER = "__ns__"


def namespace_list(record: FileRecord, options: Options) -> list[str]:
    """파일이 로드해야 할 네임스페이스 목록을 반환한다.

    파일의 namespace(없으면 전역 기본 네임스페이스)가 항상 맨 앞에 온다.
    preloadNamespaces(별칭 preload_namespaces)의 나머지 순서는 보존되고
    중복은 제거된다.
    """
    ns = record.metadata.get("namespace") or options.default_namespace
    preload = record.metadata.get("preloadNamespaces")
    if preload is None:
        preload = record.metadata.get("preload_namespaces")
    result = [ns]
    for item in as_list(preload):
        if item not in result:
            result.append(item)
    return result


def namespace_path(template: str, locale: str, namespace: str) -> str:
    return (
        template
        .replace(NAMESPACE_PLACEHOLDER, namespace)
        .replace(LOCALE_PLACEHOLDER, locale)
    )


class NamespaceSource(Protocol):
    """(locale, namespace) 번들을 조회하는 협력자."""

    async def load(self, locale: str, namespace: str) -> Any:
        ...


class FileNamespaceSource:
    """네임스페이스 경로 템플릿에 따라 디스크의 JSON 파일을 읽는다."""

    def __init__(self, template: str, base_dir: str | Path | None = None) -> None:
        self.template = template
        self.base_dir = Path(base_dir) if base_dir is not None else None

    def path_for(self, locale: str, namespace: str) -> Path:
        path = Path(namespace_path(self.template, locale, namespace))
        if self.base_dir is not None and not path.is_absolute():
            path = self.base_dir / path
        return path

    async def load(self, locale: str, namespace: str) -> Any:
        path = self.path_for(locale, namespace)
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ResourceLoadError(locale, namespace, e) from e


class MappingNamespaceSource:
    """메모리에 보관된 번들을 제공한다: {locale: {namespace: tree}}."""

    def __init__(self, bundles: Mapping[str, Mapping[str, Any]]) -> None:
        self._bundles = bundles

    async def load(self, locale: str, namespace: str) -> Any:
        try:
            return copy.deepcopy(self._bundles[locale][namespace])
        except KeyError as e:
            raise ResourceLoadError(
                locale, namespace, FileNotFoundError(f"{locale}/{namespace}"),
            ) from e


class BundleRegistry:
    """프로세스 전역 번들 저장소.

    같은 (locale, namespace)는 항상 덮어쓴다 (마지막 기록이 유지됨).
    바인딩은 이 저장소를 읽지 않는다.
    """

    def __init__(self) -> None:
        self._bundles: ResourceStore = {}

    def add_resource_bundle(self, locale: str, namespace: str, tree: Any) -> None:
        self._bundles.setdefault(locale, {})[namespace] = copy.deepcopy(tree)

    def has_bundle(self, locale: str, namespace: str) -> bool:
        return namespace in self._bundles.get(locale, {})

    def get_bundle(self, locale: str, namespace: str) -> Any:
        return self._bundles.get(locale, {}).get(namespace)

    def snapshot(self) -> ResourceStore:
        return copy.deepcopy(self._bundles)


class ResourceLoader:
    """번들을 동시에 로드하여 호출 단위 로컬 스토어를 구성한다."""

    def __init__(self, source: NamespaceSource, registry: BundleRegistry | None = None) -> None:
        self._source = source
        self._registry = registry

    async def load(self, locales: Iterable[str], namespaces: Iterable[str]) -> ResourceStore:
        """모든 (locale, namespace) 번들을 로드한다.

        하나라도 실패하면 ResourceLoadError가 전파되고 스토어는 반환되지 않는다.
        """
        pairs = [(lng, ns) for lng in locales for ns in namespaces]
        logger.debug("Loading namespaces: %s", pairs)

        trees = await gather_or_cancel(self._load_one(lng, ns) for lng, ns in pairs)

        store: ResourceStore = {}
        for (lng, ns), tree in zip(pairs, trees):
            store.setdefault(lng, {})[ns] = tree
            if self._registry is not None:
                self._registry.add_resource_bundle(lng, ns, tree)
        return store

    async def _load_one(self, locale: str, namespace: str) -> Any:
        try:
            tree = await self._source.load(locale, namespace)
        except ResourceLoadError:
            raise
        except Exception as e:
            raise ResourceLoadError(locale, namespace, e) from e
        if isinstance(tree, (str, bytes)):
            try:
                tree = json.loads(tree)
            except json.JSONDecodeError as e:
                raise ResourceLoadError(locale, namespace, e) from e
        return tree
