"""호스트 빌드: 소스 디렉토리 → 가상 파일 트리 → 팬아웃 → 출력 디렉토리."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from i18nfanout.fanout import FanoutReport, LocaleFanout
from i18nfanout.models import FileRecord, VirtualFileSet
from i18nfanout.utils.config import Config

logger = logging.getLogger("i18nfanout.app")

_FRONT_MATTER_FENCE = b"---"


def parse_front_matter(raw: bytes) -> tuple[dict[str, Any], bytes]:
    """``---`` 로 감싼 YAML 프런트매터를 분리한다. 없으면 빈 dict를 반환한다."""
    lines = raw.splitlines(keepends=True)
    if not lines or lines[0].rstrip() != _FRONT_MATTER_FENCE:
        return {}, raw

    for idx in range(1, len(lines)):
        if lines[idx].rstrip() == _FRONT_MATTER_FENCE:
            header = b"".join(lines[1:idx]).decode("utf-8")
            metadata = yaml.safe_load(header) or {}
            if not isinstance(metadata, dict):
                raise ValueError("Front matter must be a mapping")
            return metadata, b"".join(lines[idx + 1:])
    return {}, raw


class SiteBuild:
    """소스 트리를 읽어 로케일별 트리를 출력 디렉토리에 기록한다."""

    def __init__(
        self,
        config: Config,
        source: str | Path | None = None,
        destination: str | Path | None = None,
    ) -> None:
        self.config = config
        self.source = Path(source or config.get("build.source", "src"))
        self.destination = Path(destination or config.get("build.destination", "build"))
        self.fanout = LocaleFanout.from_config(config)

    def read(self) -> VirtualFileSet:
        """소스 디렉토리의 모든 파일을 상대 POSIX 경로 키로 읽는다."""
        if not self.source.is_dir():
            raise FileNotFoundError(f"Source directory not found: {self.source}")

        files: VirtualFileSet = {}
        for path in sorted(self.source.rglob("*")):
            if not path.is_file():
                continue
            key = path.relative_to(self.source).as_posix()
            metadata, contents = parse_front_matter(path.read_bytes())
            files[key] = FileRecord(contents=contents, metadata=metadata)
        logger.info("Read %d files from %s", len(files), self.source)
        return files

    def write(self, files: VirtualFileSet) -> int:
        """가상 파일 트리를 출력 디렉토리에 기록한다."""
        for key, record in files.items():
            target = self.destination / key.lstrip("/")
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(record.contents)
        logger.info("Wrote %d files to %s", len(files), self.destination)
        return len(files)

    async def run(self) -> FanoutReport:
        """읽기 → 팬아웃 → 쓰기를 수행한다."""
        files = self.read()
        report = await self.fanout.fanout(files)
        self.write(files)
        return report
