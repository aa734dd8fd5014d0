import logging
from typing import Awaitable

from ..core.config import settings
from ..core.metrics import ESTIMATES, ESTIMATE_COMPARABLES, NOTIFY_FAILURES
from ..core.utils import yen
from ..data.base import Dataset, PropertyType, ValuationInput, ValuationResult
from ..engine.valuation import ValuationEngine
from ..notify.base import NotificationPort
from ..schemas import EstimateRequest, LeadRequest

logger = logging.getLogger(__name__)

MAX_LEAD_TAGS = 10
USER_MAIL_SUBJECT = "不動産査定（概算）結果"

def to_valuation_input(body: EstimateRequest) -> ValuationInput:
    return ValuationInput(
        property_type=PropertyType(body.type),
        area_sqm=body.area_sqm,
        built_year=body.built_year,
        lat=body.lat,
        lng=body.lng,
        walk_minutes_override=body.walk_minutes,
    )

def user_mail_html(result: ValuationResult) -> str:
    adj = result.adjustments
    return (
        "<p>概算の査定結果です。</p>\n"
        "<ul>\n"
        f"  <li><b>参考価格</b>：{yen(result.price)} 円</li>\n"
        f"  <li><b>レンジ</b>：{yen(result.range_low)} 〜 {yen(result.range_high)} 円</li>\n"
        f"  <li><b>補正（徒歩）</b>：{adj.walk_rate * 100:.1f}%</li>\n"
        f"  <li><b>補正（築年）</b>：{adj.age_rate * 100:.1f}%</li>\n"
        f"  <li><b>丸め</b>：{result.rounding_unit // 10000} 万円単位</li>\n"
        "</ul>\n"
        "<p>※ 本結果は参考値です。</p>\n"
    )

def operator_text(request_id: str, result: ValuationResult) -> str:
    return (
        f"id={request_id}\n"
        f"price={result.price}\n"
        f"range={result.range_low}-{result.range_high}\n"
        f"station={result.basis.nearest_station_name or ''}\n"
        f"walk={result.basis.walk_minutes}\n"
    )

class EstimateService:
    """
    Orchestrates:
      request → ValuationInput → engine.compute → notifications → payload
    The dataset is injected; this class never reads global state for it.
    Notification failures are logged and counted, never raised.
    """
    def __init__(self, dataset: Dataset, notifier: NotificationPort):
        self.engine = ValuationEngine(dataset)
        self.notifier = notifier

    async def _deliver(self, channel: str, send: Awaitable[None]) -> bool:
        try:
            await send
        except Exception:
            NOTIFY_FAILURES.labels(channel=channel).inc()
            logger.warning("notification failed (channel=%s)", channel, exc_info=True)
            return False
        return True

    async def estimate(self, body: EstimateRequest, request_id: str) -> dict:
        result = self.engine.compute(to_valuation_input(body))
        ESTIMATES.labels(property_type=body.type).inc()
        ESTIMATE_COMPARABLES.observe(result.basis.comparable_count)
        logger.info(
            "estimate computed price=%d comps=%d station=%s",
            result.price, result.basis.comparable_count, result.basis.nearest_station_name,
        )

        if body.send_to and body.email:
            await self._deliver("user", self.notifier.send_user(body.email, USER_MAIL_SUBJECT, user_mail_html(result)))
        if settings.notify_recipients:
            await self._deliver(
                "operators",
                self.notifier.send_operators("[Satei App] Estimate executed", operator_text(request_id, result)),
            )

        return {"ok": True, "id": request_id, "result": result.to_dict()}

    async def submit_lead(self, body: LeadRequest, request_id: str) -> dict:
        tags = body.tags[:MAX_LEAD_TAGS]
        logger.info("lead captured tags=%s", tags)
        if settings.notify_recipients:
            text = (
                f"email={body.email}\nname={body.name or ''}\nphone={body.phone or ''}\n"
                f"note={body.note or ''}\ntags={','.join(tags)}\nref={request_id}"
            )
            await self._deliver("operators", self.notifier.send_operators("[Satei App] New lead captured", text))
        return {"ok": True, "id": request_id}
