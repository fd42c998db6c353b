import unittest
from unittest import mock
from dataclasses import replace
from launchpilot.projections.defaults import BASE_INPUTS
from launchpilot.projections.engine import ScenarioResult, project_scenarios
from launchpilot.projections.errors import InternalError
from launchpilot.projections import insights as ins


def _scenario(**kw):
    base = dict(name="Realistic", total_revenue=100000, net_profit=50000, break_even_month=4,
                customer_lifetime_value=600, return_on_investment=120.0, monthly_data=[])
    base.update(kw)
    return ScenarioResult(**base)


class TestInsights(unittest.TestCase):
    def test_reference_saas(self):
        inputs = BASE_INPUTS
        realistic = project_scenarios(inputs)[1]
        out = ins.generate_insights(inputs, realistic)
        self.assertEqual(out.profitability.break_even_analysis, "Challenging")
        self.assertEqual(out.profitability.risk_level, "High")
        self.assertLess(out.profitability.margin_health, 0)
        self.assertAlmostEqual(out.customers.ltvcac_ratio, 291 / 150)
        self.assertEqual(out.customers.payback_period, 1)
        self.assertEqual(out.customers.customer_concentration_risk, "Low")
        self.assertEqual(out.recommendations, [ins.REC_LTV_CAC, ins.REC_BREAK_EVEN, ins.REC_MARGIN])

    def test_healthy_business_has_no_recommendations(self):
        inputs = replace(BASE_INPUTS, acquisition_cost=100, churn_rate=5, monthly_growth_rate=10)
        out = ins.generate_insights(inputs, _scenario())
        self.assertEqual(out.recommendations, [])
        self.assertEqual(out.profitability.break_even_analysis, "Achievable")
        self.assertEqual(out.profitability.risk_level, "Low")
        self.assertAlmostEqual(out.profitability.margin_health, 50.0)

    def test_recommendations_follow_check_order(self):
        inputs = replace(BASE_INPUTS, acquisition_cost=1000, churn_rate=12, monthly_growth_rate=2)
        scenario = _scenario(break_even_month=13, net_profit=1000)
        self.assertEqual(
            ins.generate_recommendations(inputs, scenario),
            [ins.REC_LTV_CAC, ins.REC_BREAK_EVEN, ins.REC_CHURN, ins.REC_GROWTH, ins.REC_MARGIN],
        )

    def test_risk_levels(self):
        self.assertEqual(ins.risk_level(100.01), "Low")
        self.assertEqual(ins.risk_level(100), "Medium")
        self.assertEqual(ins.risk_level(50.5), "Medium")
        self.assertEqual(ins.risk_level(50), "High")
        self.assertEqual(ins.risk_level(-80), "High")

    def test_concentration_risk(self):
        self.assertEqual(ins.concentration_risk(99), "High")
        self.assertEqual(ins.concentration_risk(100), "Medium")
        self.assertEqual(ins.concentration_risk(999), "Medium")
        self.assertEqual(ins.concentration_risk(1000), "Low")

    def test_payback_period(self):
        self.assertEqual(ins.payback_period(replace(BASE_INPUTS, acquisition_cost=1200, price_point=50)), 2)
        one_time = replace(BASE_INPUTS, subscription_type="one-time", acquisition_cost=120, price_point=50)
        self.assertEqual(ins.payback_period(one_time), 3)
        self.assertEqual(ins.payback_period(replace(BASE_INPUTS, acquisition_cost=0)), 0)

    def test_zero_cac_and_zero_revenue(self):
        inputs = replace(BASE_INPUTS, acquisition_cost=0)
        out = ins.generate_insights(inputs, _scenario(total_revenue=0, net_profit=-5000))
        self.assertIsNone(out.customers.ltvcac_ratio)
        self.assertEqual(out.profitability.margin_health, 0.0)
        self.assertNotIn(ins.REC_LTV_CAC, out.recommendations)

    def test_arithmetic_failure_becomes_internal_error(self):
        with mock.patch.object(ins, "project_scenarios", side_effect=OverflowError("math range error")):
            with self.assertRaises(InternalError):
                ins.build_projection(BASE_INPUTS)

    def test_aggregate_uses_realistic(self):
        scenarios = project_scenarios(BASE_INPUTS)
        body = ins.aggregate(BASE_INPUTS, scenarios)
        self.assertEqual([s["name"] for s in body["scenarios"]], ["Conservative", "Realistic", "Optimistic"])
        expected = ins.generate_insights(BASE_INPUTS, scenarios[1]).to_dict()
        self.assertEqual(body["insights"], expected)
        self.assertEqual(set(body["insights"]), {"profitabilityAnalysis", "customerMetrics", "recommendations"})


if __name__ == '__main__':
    unittest.main()
