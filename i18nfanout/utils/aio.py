"""asyncio 보조 함수."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Iterable


async def gather_or_cancel(aws: Iterable[Awaitable[Any]]) -> list[Any]:
    """asyncio.gather와 같지만, 하나라도 실패하면 남은 태스크를 취소한다.

    취소된 태스크가 모두 끝난 뒤에 첫 예외를 다시 던지므로, 호출자가 예외를
    받은 시점 이후에 실행되는 형제 태스크는 없다. 나머지 예외는 회수만 한다.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
