import unittest
from launchpilot.projections.defaults import BASE_INPUTS
from launchpilot.projections.errors import ValidationError
from launchpilot.projections.inputs import parse_inputs, validate_inputs
from dataclasses import replace


def _payload(**overrides):
    body = BASE_INPUTS.to_dict()
    body.update(overrides)
    return body


class TestParseInputs(unittest.TestCase):
    def test_round_trip_from_camel_case(self):
        inputs = parse_inputs(_payload())
        self.assertEqual(inputs, BASE_INPUTS)
        self.assertIsInstance(inputs.timeframe, int)
        self.assertIsInstance(inputs.price_point, float)

    def test_unknown_keys_ignored(self):
        inputs = parse_inputs(_payload(projectName="Widget"))
        self.assertEqual(inputs.product_type, "saas")

    def test_missing_fields_reported_in_schema_order(self):
        body = _payload()
        del body["timeframe"]
        del body["pricePoint"]
        with self.assertRaises(ValidationError) as ctx:
            parse_inputs(body)
        fields = [d["field"] for d in ctx.exception.details]
        self.assertEqual(fields, ["pricePoint", "timeframe"])
        self.assertTrue(all(d["message"] == "Required" for d in ctx.exception.details))

    def test_every_bad_field_reported(self):
        with self.assertRaises(ValidationError) as ctx:
            parse_inputs(_payload(
                productType="hardware",
                conversionRate=0.05,
                churnRate=101,
                seasonalityFactor=3,
            ))
        fields = [d["field"] for d in ctx.exception.details]
        self.assertEqual(fields, ["productType", "conversionRate", "churnRate", "seasonalityFactor"])
        self.assertIn("saas", ctx.exception.details[0]["message"])

    def test_non_numeric_values_rejected(self):
        for bad in ("97", True, None, [97], float("inf")):
            with self.assertRaises(ValidationError, msg=repr(bad)):
                parse_inputs(_payload(pricePoint=bad))

    def test_integer_too_large_for_float_rejected(self):
        huge = int("1" + "0" * 400)
        with self.assertRaises(ValidationError) as ctx:
            parse_inputs(_payload(pricePoint=huge, timeframe=huge))
        self.assertEqual(
            ctx.exception.details,
            [
                {"field": "pricePoint", "message": "Expected number"},
                {"field": "timeframe", "message": "Expected number"},
            ],
        )

    def test_timeframe_must_be_whole_months(self):
        self.assertEqual(parse_inputs(_payload(timeframe=12.0)).timeframe, 12)
        with self.assertRaises(ValidationError) as ctx:
            parse_inputs(_payload(timeframe=12.5))
        self.assertEqual(ctx.exception.details[0]["field"], "timeframe")
        with self.assertRaises(ValidationError):
            parse_inputs(_payload(timeframe=37))

    def test_body_must_be_object(self):
        for body in (None, [], "saas"):
            with self.assertRaises(ValidationError) as ctx:
                parse_inputs(body)
            self.assertEqual(ctx.exception.details[0]["field"], "body")

    def test_range_boundaries_inclusive(self):
        parse_inputs(_payload(conversionRate=0.1, churnRate=0, seasonalityFactor=0.5, timeframe=1))
        parse_inputs(_payload(conversionRate=100, churnRate=100, seasonalityFactor=2, timeframe=36))

    def test_validate_constructed_inputs(self):
        validate_inputs(BASE_INPUTS)  # should not raise
        with self.assertRaises(ValidationError):
            validate_inputs(replace(BASE_INPUTS, price_point=0.5))


if __name__ == '__main__':
    unittest.main()
