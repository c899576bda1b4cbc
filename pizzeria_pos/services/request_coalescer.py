"""
计价请求合并
连续的选择变化先防抖，再按请求内容去重；只有最后一次提交的结果会被发布
"""

import asyncio
import inspect
import json
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Union

from pydantic import BaseModel

from ..config.settings import settings

logger = logging.getLogger(__name__)


def canonical_request_key(request: Union[BaseModel, Dict[str, Any]]) -> str:
    """
    请求的规范编码：键排序，配料按ID排序，四分区标签排序
    """
    if isinstance(request, BaseModel):
        data = request.model_dump(mode="json")
    else:
        data = json.loads(json.dumps(request, default=str))

    toppings = []
    for topping in data.get("toppings") or []:
        topping = dict(topping)
        placement = topping.get("placement")
        if isinstance(placement, list):
            topping["placement"] = sorted(placement)
        toppings.append(topping)
    if "toppings" in data:
        data["toppings"] = sorted(toppings, key=lambda t: str(t.get("customization_id")))

    return json.dumps(data, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


class PriceRequestCoalescer:
    """
    计价请求合并器，由发起计价的一方持有

    - 防抖：window_seconds 内的连续提交只有最后一次会真正计价
    - 去重：相同规范编码的请求共享同一个进行中的计算；与上次结果相同则直接复用
    - 后写者胜：被后续提交取代的调用返回 None，结果不会发布
    """

    def __init__(self, calculate: Callable[[Any], Union[Any, Awaitable[Any]]],
                 window_seconds: Optional[float] = None):
        self._calculate = calculate
        self.window_seconds = settings.price_debounce_seconds if window_seconds is None else window_seconds
        self._generation = 0
        self._in_flight: Dict[str, asyncio.Future] = {}
        self.latest_key: Optional[str] = None
        self.latest_result: Any = None
        self.call_count = 0

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    async def submit(self, request) -> Any:
        self._generation += 1
        generation = self._generation

        if self.window_seconds > 0:
            await asyncio.sleep(self.window_seconds)
        if not self._is_current(generation):
            return None

        key = canonical_request_key(request)
        if key == self.latest_key and self.latest_result is not None:
            logger.debug("计价请求与上次结果相同，直接复用")
            return self.latest_result

        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._run(key, request))
            self._in_flight[key] = task
        else:
            logger.debug("相同计价请求正在进行，等待其结果")

        try:
            result = await asyncio.shield(task)
        except Exception:
            if not self._is_current(generation):
                return None
            raise

        if not self._is_current(generation):
            return None
        self.latest_key = key
        self.latest_result = result
        return result

    async def _run(self, key: str, request) -> Any:
        self.call_count += 1
        try:
            result = self._calculate(request)
            if inspect.isawaitable(result):
                result = await result
            return result
        finally:
            self._in_flight.pop(key, None)
