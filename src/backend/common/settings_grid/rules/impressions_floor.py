from __future__ import annotations

from typing import Dict

from ..models import Granularity, ParamDefinition, RuleDefinition, ValueRecord
from ..registry import register_rule
from ..rule import Rule, RuleUtilities


@register_rule
class CampaignImpressionsFloor(Rule):
    definition = RuleDefinition(
        name="Impressions Floor",
        description="Flags campaigns delivering fewer impressions than the configured floor.",
        granularity=Granularity.CAMPAIGN,
        unique_key_prefix="impressionsFloor",
        params={
            "min_impressions": ParamDefinition(label="Min. Impressions", default_value="1", number_format="#,##0"),
        },
    )

    async def evaluate(self, utilities: RuleUtilities) -> Dict[str, ValueRecord]:
        previous = utilities.get_rule().get_values()
        values: Dict[str, ValueRecord] = {}
        for row in await utilities.client.get_report(self.definition.granularity):
            entity_id = str(row["id"])
            floor = self.settings.get_or_default(entity_id)["min_impressions"]
            if not floor:
                continue
            impressions = int(row.get("impressions", 0))
            fields = {}
            prior = previous.get(entity_id)
            if isinstance(prior, dict) and "value" in prior:
                fields["Previous"] = str(prior["value"])
            values[entity_id] = ValueRecord(
                value=str(impressions),
                anomalous=impressions < int(floor),
                fields=fields,
            )
        return values
