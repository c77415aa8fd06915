from __future__ import annotations

import sys
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional, Tuple

import structlog

logger = structlog.get_logger(__name__)

StrategyFn = Callable[..., Any]
Validator = Callable[[Any], bool]


@dataclass(frozen=True)
class FieldStrategy:
    name: str
    fn: StrategyFn
    fn_attr: Optional[str] = field(init=False, repr=False)
    fn_module: Optional[str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fn_attr", getattr(self.fn, "__name__", None))
        object.__setattr__(self, "fn_module", getattr(self.fn, "__module__", None))

    def run(self, *args: Any, **kwargs: Any) -> Any:
        # Resolve through the owning module so monkeypatched callables are honoured.
        fn = self.fn
        if self.fn_attr and self.fn_module:
            module = sys.modules.get(self.fn_module)
            candidate = getattr(module, self.fn_attr, None)
            if callable(candidate):
                fn = candidate
        return fn(*args, **kwargs)


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, dict)):
        return not value
    return False


def resolve_field(
    field_name: str,
    strategies: Iterable[FieldStrategy],
    *args: Any,
    validate: Optional[Validator] = None,
    url: Optional[str] = None,
) -> Tuple[Any, Optional[str]]:
    """Run ``strategies`` in order and return ``(value, strategy_name)``.

    The first strategy whose value is non-empty and passes ``validate`` wins.
    A strategy that raises is logged and skipped. ``(None, None)`` means the
    chain was exhausted.
    """
    for strategy in strategies:
        attempt_started = time.perf_counter()
        try:
            value = strategy.run(*args)
        except Exception as exc:
            elapsed_ms = int((time.perf_counter() - attempt_started) * 1000)
            # structlog uses the positional argument for the event name; keep ``event`` keyword-only.
            logger.warning(
                event="extractor_attempt",
                operation="extractor.attempt",
                field=field_name,
                strategy=strategy.name,
                url=url,
                status="exception",
                error_type=exc.__class__.__name__,
                error=str(exc),
                elapsed_ms=elapsed_ms,
            )
            continue

        elapsed_ms = int((time.perf_counter() - attempt_started) * 1000)
        if _is_empty(value):
            status = "empty"
        elif validate is not None and not validate(value):
            status = "rejected"
        else:
            status = "success"

        # structlog uses the positional argument for the event name; keep ``event`` keyword-only.
        logger.info(
            event="extractor_attempt",
            operation="extractor.attempt",
            field=field_name,
            strategy=strategy.name,
            url=url,
            status=status,
            elapsed_ms=elapsed_ms,
        )
        if status != "success":
            continue

        logger.debug(
            event="field_resolved",
            operation="extractor.field",
            field=field_name,
            strategy=strategy.name,
            url=url,
        )
        return value, strategy.name

    logger.info(
        event="field_unresolved",
        operation="extractor.field",
        field=field_name,
        url=url,
    )
    return None, None


__all__ = ["FieldStrategy", "resolve_field"]
