"""로케일 팬아웃 처리 중 발생하는 예외 계층."""

from __future__ import annotations


class FanoutError(Exception):
    """i18nfanout 예외의 기본 클래스."""


class ConfigError(FanoutError, ValueError):
    """옵션 형태나 값이 잘못된 경우."""


class ResourceLoadError(FanoutError):
    """(locale, namespace) 번들의 조회 또는 파싱에 실패한 경우.

    해당 (파일, 로케일) 쌍의 결과는 설치되지 않으며 빌드 전체가 중단된다.
    """

    def __init__(self, locale: str, namespace: str, cause: BaseException) -> None:
        self.locale    = locale
        self.namespace = namespace
        self.cause     = cause
        super().__init__(
            f"Failed to load namespace {namespace!r} for locale {locale!r}: {cause}"
        )


class OutputPathCollision(FanoutError):
    """두 개의 (파일, 로케일) 쌍이 같은 출력 경로를 계산한 경우."""

    def __init__(self, path: str, first: tuple[str, str], second: tuple[str, str]) -> None:
        self.path   = path
        self.first  = first
        self.second = second
        super().__init__(
            f"Output path {path!r} produced by both "
            f"{first[0]!r} ({first[1]}) and {second[0]!r} ({second[1]})"
        )
