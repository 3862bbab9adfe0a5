import copy
import json
import unittest

from fakes import SAMPLE_RESPONSE, SAMPLE_RESULT

from resumelens.agents.response_validator import ResponseValidator, validate_response
from resumelens.errors import ErrorKind, ValidationError


def _with(**changes):
    data = copy.deepcopy(SAMPLE_RESULT)
    data.update(changes)
    return json.dumps(data)


class ResponseValidatorTests(unittest.TestCase):
    def setUp(self):
        self.validator = ResponseValidator()

    def test_well_formed_payload_round_trips(self):
        result = self.validator.validate(SAMPLE_RESPONSE)
        self.assertEqual(result.model_dump(), SAMPLE_RESULT)

    def test_casing_order_and_duplicates_pass_through(self):
        raw = _with(missingKeywords=["Tableau", "python", "tableau"], skillsFound=["SQL", "Excel"])
        result = self.validator.validate(raw)
        self.assertEqual(result.missingKeywords, ["Tableau", "python", "tableau"])
        self.assertEqual(result.skillsFound, ["SQL", "Excel"])

    def test_code_fenced_payload_is_accepted(self):
        result = self.validator.validate("```json\n" + SAMPLE_RESPONSE + "\n```")
        self.assertEqual(result.score, 72)

    def test_extra_keys_are_ignored(self):
        result = self.validator.validate(_with(summary="extra"))
        self.assertEqual(result.model_dump(), SAMPLE_RESULT)

    def test_malformed_payloads(self):
        for raw in ["", "   ", "not json", '{"score": 72', "Here is the JSON: {}"]:
            with self.subTest(raw=raw):
                with self.assertRaises(ValidationError) as ctx:
                    self.validator.validate(raw)
                self.assertIn("malformed payload", ctx.exception.message)
                self.assertIs(ctx.exception.kind, ErrorKind.VALIDATION)

    def test_deeply_nested_payload_is_malformed(self):
        with self.assertRaises(ValidationError) as ctx:
            self.validator.validate("[" * 200000 + "]" * 200000)
        self.assertIn("malformed payload", ctx.exception.message)

    def test_non_object_payload_names_root(self):
        with self.assertRaises(ValidationError) as ctx:
            self.validator.validate("[1, 2, 3]")
        self.assertEqual(ctx.exception.field, "<root>")

    def test_missing_field_is_named(self):
        data = copy.deepcopy(SAMPLE_RESULT)
        del data["atsFriendliness"]
        with self.assertRaises(ValidationError) as ctx:
            self.validator.validate(json.dumps(data))
        self.assertEqual(ctx.exception.field, "atsFriendliness")

    def test_score_out_of_range_is_rejected_not_clamped(self):
        for score in (-1, 101, 250):
            with self.subTest(score=score):
                with self.assertRaises(ValidationError) as ctx:
                    self.validator.validate(_with(score=score))
                self.assertEqual(ctx.exception.field, "score")

    def test_score_bounds_are_inclusive(self):
        self.assertEqual(self.validator.validate(_with(score=0)).score, 0)
        self.assertEqual(self.validator.validate(_with(score=100)).score, 100)

    def test_score_must_be_an_integer(self):
        for score in (72.5, 72.0, "72", True, None):
            with self.subTest(score=score):
                with self.assertRaises(ValidationError) as ctx:
                    self.validator.validate(_with(score=score))
                self.assertEqual(ctx.exception.field, "score")

    def test_list_items_must_be_strings(self):
        with self.assertRaises(ValidationError) as ctx:
            self.validator.validate(_with(skillsFound=["SQL", 3]))
        self.assertEqual(ctx.exception.field, "skillsFound.1")

    def test_bullet_fields_must_be_non_empty(self):
        raw = _with(weakBulletPoints=[{"original": "Did stuff", "suggestion": ""}])
        with self.assertRaises(ValidationError) as ctx:
            self.validator.validate(raw)
        self.assertEqual(ctx.exception.field, "weakBulletPoints.0.suggestion")

    def test_bullet_missing_original(self):
        raw = _with(weakBulletPoints=[{"suggestion": "Better"}])
        with self.assertRaises(ValidationError) as ctx:
            self.validator.validate(raw)
        self.assertEqual(ctx.exception.field, "weakBulletPoints.0.original")

    def test_module_level_helper(self):
        self.assertEqual(validate_response(SAMPLE_RESPONSE).atsFriendliness, "Moderate")


if __name__ == "__main__":
    unittest.main()
