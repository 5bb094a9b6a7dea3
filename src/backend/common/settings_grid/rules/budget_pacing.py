from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Dict

from ..models import Granularity, ParamDefinition, RuleDefinition, ValueRecord
from ..registry import register_rule
from ..rule import Rule, RuleUtilities


def _to_decimal(raw: str, *, field: str) -> Decimal:
    try:
        return Decimal(str(raw).strip())
    except InvalidOperation as exc:
        raise ValueError(f"Invalid number for {field}: {raw!r}") from exc


@register_rule
class CampaignBudgetPacing(Rule):
    definition = RuleDefinition(
        name="Budget Pacing",
        description="Flags campaigns whose spend-to-budget ratio falls outside the configured range.",
        granularity=Granularity.CAMPAIGN,
        unique_key_prefix="budgetPacing",
        helper="Pacing is spend divided by budget.",
        params={
            "min_ratio": ParamDefinition(label="Min. Pacing Ratio", default_value="0.5", number_format="0.00"),
            "max_ratio": ParamDefinition(label="Max. Pacing Ratio", default_value="1.1", number_format="0.00"),
        },
    )

    async def evaluate(self, utilities: RuleUtilities) -> Dict[str, ValueRecord]:
        values: Dict[str, ValueRecord] = {}
        for row in await utilities.client.get_report(self.definition.granularity):
            entity_id = str(row["id"])
            settings = self.settings.get_or_default(entity_id)
            if not settings["min_ratio"] or not settings["max_ratio"]:
                continue
            budget = _to_decimal(row.get("budget", "0"), field="budget")
            spend = _to_decimal(row.get("spend", "0"), field="spend")
            if budget == 0:
                values[entity_id] = ValueRecord(
                    value="",
                    anomalous=spend > 0,
                    fields={"Budget": str(budget), "Spend": str(spend)},
                )
                continue
            ratio = (spend / budget).quantize(Decimal("0.01"))
            low = _to_decimal(settings["min_ratio"], field="Min. Pacing Ratio")
            high = _to_decimal(settings["max_ratio"], field="Max. Pacing Ratio")
            values[entity_id] = ValueRecord(
                value=str(ratio),
                anomalous=not (low <= ratio <= high),
                fields={"Budget": str(budget), "Spend": str(spend)},
            )
        return values
