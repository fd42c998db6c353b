import unittest
from dataclasses import replace
from datetime import datetime, timezone
from launchpilot.exports.writers import write_monthly_csv, write_summary_csv, SCHEMAS
from launchpilot.exports.reports import projection_report_md
from launchpilot.projections.defaults import BASE_INPUTS
from launchpilot.projections.insights import build_projection
import csv
import io


def _projection(inputs=BASE_INPUTS):
    return build_projection(inputs, generated_at=datetime(2025, 3, 1, tzinfo=timezone.utc))


class TestExports(unittest.TestCase):
    def test_monthly_csv(self):
        proj = _projection()
        txt = write_monthly_csv(proj["scenarios"])
        reader = csv.DictReader(io.StringIO(txt))
        recs = list(reader)
        self.assertEqual(reader.fieldnames, SCHEMAS["monthly"])
        self.assertEqual(len(recs), 3 * BASE_INPUTS.timeframe)
        self.assertEqual(recs[0]["scenario"], "Conservative")
        self.assertEqual(recs[0]["month"], "1")
        self.assertEqual(recs[-1]["scenario"], "Optimistic")
        self.assertEqual(recs[-1]["monthName"], "Dec")

    def test_summary_csv(self):
        txt = write_summary_csv(_projection()["scenarios"])
        lines = txt.splitlines()
        self.assertTrue(lines[0].startswith("name,totalRevenue,netProfit"))
        self.assertEqual([l.split(",")[0] for l in lines[1:]], ["Conservative", "Realistic", "Optimistic"])

    def test_report_md(self):
        proj = _projection()
        md = projection_report_md(BASE_INPUTS.to_dict(), proj)
        self.assertIn("# Financial Projections", md)
        self.assertIn("Generated at 2025-03-01T00:00:00Z", md)
        self.assertIn("| Realistic |", md)
        self.assertIn("not reached", md)
        self.assertIn("## Recommendations", md)
        self.assertIn("## Known limitations", md)
        self.assertIn("renewals of existing annual subscribers are not modeled", md)

    def test_report_md_break_even_month(self):
        inputs = replace(BASE_INPUTS, price_point=2000, acquisition_cost=100, conversion_rate=10,
                         marketing_budget=1000, fixed_costs=0)
        proj = _projection(inputs)
        md = projection_report_md(inputs.to_dict(), proj)
        self.assertIn("| Realistic | $", md)
        self.assertNotIn("not reached", md)


if __name__ == '__main__':
    unittest.main()
