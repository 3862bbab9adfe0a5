import unittest

from resumelens.agents.prompt_builder import ANALYSIS_SCHEMA, PromptBuilder, to_messages
from resumelens.state import AnalysisRequest, build_role_context


class RoleContextTests(unittest.TestCase):
    def test_title_and_description(self):
        self.assertEqual(
            build_role_context("Data Analyst", "Requires Python, SQL, Tableau"),
            "Data Analyst\n\nDescription: Requires Python, SQL, Tableau",
        )

    def test_single_field(self):
        self.assertEqual(build_role_context("Data Analyst", ""), "Data Analyst")
        self.assertEqual(build_role_context("", "Requires SQL"), "Description: Requires SQL")


class PromptBuilderTests(unittest.TestCase):
    def setUp(self):
        self.builder = PromptBuilder()

    def test_embeds_inputs_verbatim(self):
        request = AnalysisRequest.from_role("Built dashboards using SQL", "Data Analyst", "Requires Python, SQL, Tableau")
        payload = self.builder.build(request)
        self.assertIn("Resume Content: Built dashboards using SQL", payload.prompt_text)
        self.assertIn("Data Analyst\n\nDescription: Requires Python, SQL, Tableau", payload.prompt_text)

    def test_is_deterministic(self):
        request = AnalysisRequest(resume_text="cv", role_context="role")
        self.assertEqual(self.builder.build(request), self.builder.build(request))

    def test_braces_in_user_text_stay_literal(self):
        resume = 'Wrote {"score": 100} templates and {placeholder} strings'
        payload = self.builder.build(AnalysisRequest(resume_text=resume, role_context="{role}"))
        self.assertIn(resume, payload.prompt_text)
        self.assertIn("a {role} position", payload.prompt_text)

    def test_schema_lists_every_result_field(self):
        payload = self.builder.build(AnalysisRequest(resume_text="cv", role_context="role"))
        schema = payload.output_schema
        self.assertEqual(
            set(schema["required"]),
            {"score", "missingKeywords", "weakBulletPoints", "atsFriendliness", "skillsFound"},
        )
        self.assertEqual(schema["properties"]["score"]["type"], "integer")
        self.assertEqual(schema["properties"]["weakBulletPoints"]["items"]["required"], ["original", "suggestion"])

    def test_schema_is_a_copy(self):
        payload = self.builder.build(AnalysisRequest(resume_text="cv", role_context="role"))
        payload.output_schema["required"].append("extra")
        self.assertNotIn("extra", ANALYSIS_SCHEMA["required"])

    def test_messages_are_single_user_turn(self):
        payload = self.builder.build(AnalysisRequest(resume_text="cv", role_context="role"))
        messages = to_messages(payload)
        self.assertEqual(len(messages), 1)
        self.assertEqual(messages[0].content, payload.prompt_text)


if __name__ == "__main__":
    unittest.main()
