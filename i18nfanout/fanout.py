"""로케일 팬아웃 오케스트레이터.

패턴에 매칭되는 각 파일을 설정된 로케일 수만큼 복제하고, 복제본마다
로컬라이즈된 경로, 리소스 스토어, t / tt / tpath 바인딩을 붙인다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from i18nfanout.binder import bind
from i18nfanout.bootstrap import bootstrap, client_config
from i18nfanout.errors import OutputPathCollision
from i18nfanout.matching import matches
from i18nfanout.models import FileRecord, Options, VirtualFileSet
from i18nfanout.paths import localised_path
from i18nfanout.resources import (
    BundleRegistry,
    FileNamespaceSource,
    NamespaceSource,
    ResourceLoader,
    namespace_list,
)
from i18nfanout.translation import TranslationEngine
from i18nfanout.utils.aio import gather_or_cancel
from i18nfanout.utils.config import Config

logger = logging.getLogger("i18nfanout.fanout")

HELPERS_ASSET = Path(__file__).resolve().parent / "assets" / "i18n-helpers.js"


@dataclass
class FanoutReport:
    """한 번의 팬아웃 실행 결과 요약."""
    matched: list[str] = field(default_factory=list)
    written: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    helpers_injected: bool = False


class LocaleFanout:
    """가상 파일 트리를 로케일별 트리로 변환한다."""

    def __init__(
        self,
        options: Options,
        source: NamespaceSource | None = None,
        registry: BundleRegistry | None = None,
        interpolation_prefix: str = "{{",
        interpolation_suffix: str = "}}",
    ) -> None:
        options.validate()
        self._options = options
        self._source: NamespaceSource = source or FileNamespaceSource(
            options.namespace_path_template,
        )
        self.registry = registry if registry is not None else BundleRegistry()
        self._loader = ResourceLoader(self._source, self.registry)
        self._interpolation = (interpolation_prefix, interpolation_suffix)
        self.last_report: FanoutReport | None = None

    @classmethod
    def from_config(cls, config: Config, source: NamespaceSource | None = None) -> LocaleFanout:
        """Config에서 옵션과 보간 구분자를 읽어 인스턴스를 만든다."""
        return cls(
            Options.from_config(config),
            source=source,
            interpolation_prefix=config.get("translation.interpolation.prefix", "{{"),
            interpolation_suffix=config.get("translation.interpolation.suffix", "}}"),
        )

    @property
    def options(self) -> Options:
        return self._options

    async def run(self, files: VirtualFileSet) -> VirtualFileSet:
        """files를 제자리에서 변환하고 그대로 반환한다. 요약은 last_report에 남는다."""
        self.last_report = await self.fanout(files)
        return files

    async def fanout(self, files: VirtualFileSet) -> FanoutReport:
        """매칭되는 모든 파일 × 로케일을 처리한다.

        ResourceLoadError / OutputPathCollision은 그대로 전파된다 (빌드 중단).
        첫 실패 시 아직 진행 중인 다른 파일의 처리는 취소되고 커밋되지 않는다.
        """
        opts = self._options
        report = FanoutReport()
        claimed: dict[str, tuple[str, str]] = {}

        helpers_path = opts.helpers_path
        inject_helpers = bool(helpers_path) and helpers_path not in files

        # 키 스냅샷: 처리 중 추가되는 출력 경로는 다시 방문하지 않는다
        selected = {
            path: files[path] for path in list(files)
            if matches(path, opts.pattern)
        }
        report.matched.extend(selected)

        await gather_or_cancel(
            self._process_file(files, path, record, claimed, report)
            for path, record in selected.items()
        )

        if inject_helpers:
            files[helpers_path] = FileRecord(contents=HELPERS_ASSET.read_bytes())
            report.helpers_injected = True
            logger.debug("Injected helper script at %s", helpers_path)

        logger.info(
            "Localised %d files into %d outputs (%d locales), removed %d originals",
            len(report.matched), len(report.written), len(opts.locales), len(report.removed),
        )
        return report

    async def _process_file(
        self,
        files: VirtualFileSet,
        path: str,
        original: FileRecord,
        claimed: dict[str, tuple[str, str]],
        report: FanoutReport,
    ) -> None:
        logger.debug("Processing %s", path)
        localised = await gather_or_cancel(
            self._localise(path, original, locale) for locale in self._options.locales
        )
        # 동기화 지점: 모든 로케일이 성공한 뒤에만 커밋한다
        self._commit(files, path, localised, claimed, report)

    async def _localise(self, path: str, original: FileRecord, locale: str) -> tuple[str, FileRecord]:
        """(파일, 로케일) 쌍 하나를 처리한다. 파일 트리는 건드리지 않는다."""
        opts = self._options
        record = original.clone()
        out_path = localised_path(path, opts.path_template, locale)

        namespaces = namespace_list(record, opts)
        locales = [locale]
        if opts.fallback_locale and opts.fallback_locale != locale:
            locales.append(opts.fallback_locale)
        store = await self._loader.load(locales, namespaces)

        default_ns = namespaces[0]
        engine = TranslationEngine(
            store,
            default_ns,
            fallback_locale=opts.fallback_locale,
            interpolation_prefix=self._interpolation[0],
            interpolation_suffix=self._interpolation[1],
        )
        binding = bind(
            engine,
            locale,
            default_ns,
            prefix=record.metadata.get("prefix"),
            path_template=opts.path_template,
            template_engine=opts.template_engine,
        )

        record.locale    = locale
        record.binding   = binding
        record.orig_path = path
        record.res_store = store
        record.bootstrap = bootstrap(client_config(
            locale, opts.namespaces, default_ns, binding.prefix, opts.path_template, store,
            fallback_locale=opts.fallback_locale,
        ))
        return out_path, record

    def _commit(
        self,
        files: VirtualFileSet,
        path: str,
        localised: list[tuple[str, FileRecord]],
        claimed: dict[str, tuple[str, str]],
        report: FanoutReport,
    ) -> None:
        # 충돌 검사를 먼저 끝내야 실패 시 부분 기록이 남지 않는다
        pending: dict[str, tuple[str, str]] = {}
        for out_path, record in localised:
            owner = (path, record.locale or "")
            previous = pending.get(out_path) or claimed.get(out_path)
            if previous is not None:
                if self._options.on_collision == "error":
                    raise OutputPathCollision(out_path, previous, owner)
                logger.warning(
                    "Output path %s from %s (%s) overwrites %s (%s)",
                    out_path, owner[0], owner[1], previous[0], previous[1],
                )
            pending[out_path] = owner

        for out_path, record in localised:
            if out_path in files and out_path != path and out_path not in claimed:
                logger.warning("Output path %s replaces an existing file", out_path)
            logger.debug("Adding file %s", out_path)
            files[out_path] = record
            claimed[out_path] = pending[out_path]
            report.written.append(out_path)

        # 어떤 로케일의 출력도 원래 경로를 차지하지 않을 때만 원본을 제거한다
        if path not in claimed:
            logger.debug("Removing file %s", path)
            del files[path]
            report.removed.append(path)
