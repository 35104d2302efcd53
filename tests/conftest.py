"""Shared fixtures for i18nfanout tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from i18nfanout.models import FileRecord, Options
from i18nfanout.resources import MappingNamespaceSource
from i18nfanout.utils.config import Config

_ENV_VARS = (
    "I18NFANOUT_CONFIG",
    "I18NFANOUT_LOCALES",
    "I18NFANOUT_PATTERN",
    "I18NFANOUT_PATH_TEMPLATE",
    "I18NFANOUT_NAMESPACES",
    "I18NFANOUT_NAMESPACE_PATH",
    "I18NFANOUT_FALLBACK_LOCALE",
    "I18NFANOUT_TEMPLATE_ENGINE",
    "I18NFANOUT_LOG_LEVEL",
)

BUNDLES: dict[str, dict[str, Any]] = {
    "en": {
        "translations": {
            "common": {"foo": "Foo!!!"},
            "home": {"hello": "Hello {{name}}"},
        },
        "foo": {"foo": {"bar": "Foobar"}},
    },
    "fr": {
        "translations": {
            "common": {"foo": "Fou!!!"},
            "home": {"hello": "Bonjour {{name}}"},
        },
        "foo": {"foo": {"bar": "Foobar!!"}},
    },
}


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch):
    """셸 환경의 I18NFANOUT_* 변수가 테스트 설정을 덮어쓰지 않도록 제거한다."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def bundles() -> dict[str, dict[str, Any]]:
    return json.loads(json.dumps(BUNDLES))


@pytest.fixture
def locales_dir(tmp_path: Path) -> Path:
    """locales/<lng>/<ns>.json 구조의 번역 파일을 만든다."""
    root = tmp_path / "locales"
    for lng, namespaces in BUNDLES.items():
        for ns, tree in namespaces.items():
            target = root / lng / f"{ns}.json"
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(json.dumps(tree, ensure_ascii=False), encoding="utf-8")
    return root


@pytest.fixture
def source(bundles) -> MappingNamespaceSource:
    return MappingNamespaceSource(bundles)


@pytest.fixture
def options() -> Options:
    return Options(
        locales=["en", "fr"],
        pattern=["**/*.hamlc"],
        namespaces=["translations"],
        helpers_path=None,
    )


@pytest.fixture
def files() -> dict[str, FileRecord]:
    return {
        "index.hamlc": FileRecord(
            contents=b"= t('home.hello', name='John Doe')",
            metadata={"title": "Home", "preloadNamespaces": "foo"},
        ),
        "css/site.css": FileRecord(contents=b"body {}"),
    }


@pytest.fixture
def config(tmp_path: Path, locales_dir: Path) -> Config:
    """테스트 전용 YAML 설정 파일을 로드한다."""
    yaml_content = f"""
i18nfanout:
  locales: [en, fr]
  pattern: ["**/*.html"]
  path_template: ":locale/:file"
  namespaces: [translations]
  namespace_path_template: "{locales_dir.as_posix()}/__lng__/__ns__.json"
  fallback_locale: false
  helpers_path: "scripts/i18n-helpers.js"
  build:
    source: "{(tmp_path / 'src').as_posix()}"
    destination: "{(tmp_path / 'build').as_posix()}"
  logging:
    level: DEBUG
    directory: "{(tmp_path / 'logs').as_posix()}"
"""
    config_file = tmp_path / "test_config.yaml"
    config_file.write_text(yaml_content)
    return Config.load(config_file)
