"""Drive the clipboard strategy chain and report the outcome once."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional, Sequence

from ..errors import ClipboardWriteError
from ..models import ClipboardPayload, DeliveryOutcome
from ..ports import ClipboardBackend, SurfaceProvider
from .strategies import CopyEventFallback, PlainTextWrite, RichWrite, StrategyStatus

if TYPE_CHECKING:
    from ..notify import ResultReporter

log = logging.getLogger(__name__)


def default_strategies(
    clipboard: ClipboardBackend,
    surfaces: Optional[SurfaceProvider] = None,
    *,
    window_id: Optional[int] = None,
    index: int = 0,
) -> List:
    return [
        PlainTextWrite(clipboard),
        RichWrite(clipboard),
        CopyEventFallback(surfaces, window_id=window_id, index=index),
        PlainTextWrite(clipboard, last_resort=True),
    ]


async def deliver(
    payload: ClipboardPayload,
    strategies: Sequence,
    reporter: Optional["ResultReporter"] = None,
) -> DeliveryOutcome:
    """Try ``strategies`` in order; the first non-unsupported result is final."""
    for strategy in strategies:
        log.debug("trying clipboard strategy %s", strategy.name)
        result = await strategy.attempt(payload)
        if result.status is StrategyStatus.UNSUPPORTED:
            if result.error is not None:
                log.debug("strategy %s yielded: %s", strategy.name, result.error)
            continue
        outcome = DeliveryOutcome(
            success=result.status is StrategyStatus.SUCCESS,
            count=payload.count,
            plain_text=payload.plain_text,
            strategy=strategy.name,
            error=result.error,
        )
        await _report(outcome, reporter)
        return outcome

    outcome = DeliveryOutcome(
        success=False,
        count=payload.count,
        plain_text=payload.plain_text,
        error=ClipboardWriteError("no clipboard strategy accepted the payload"),
    )
    await _report(outcome, reporter)
    return outcome


async def _report(outcome: DeliveryOutcome, reporter: Optional["ResultReporter"]) -> None:
    if outcome.success:
        log.debug("copied %d tab(s) via %s", outcome.count, outcome.strategy)
        if reporter is not None:
            await reporter.copied(outcome.count, outcome.plain_text)
        return
    log.error("failed to write text/data to clipboard: %s", outcome.error)
    if reporter is not None:
        await reporter.failed(outcome.error)
