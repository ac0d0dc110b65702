import unittest

from resume_analyzer.exceptions import ModelResponseError
from resume_analyzer.services.json_recovery import (
    find_json_object, parse_model_json, repair_json, strip_code_fences
)


class JsonRecoveryTests(unittest.TestCase):
    def test_strip_code_fences(self):
        self.assertEqual(strip_code_fences('```json\n{"a": 1}\n```'), '{"a": 1}')

    def test_prose_around_object(self):
        raw = 'Sure! Here is the analysis: {"name": "Jane Doe"} Let me know if you need more.'
        self.assertEqual(parse_model_json(raw), {"name": "Jane Doe"})

    def test_first_balanced_object_wins(self):
        raw = '{"name": "A {not a brace}", "skills": []} trailing {"other": 1}'
        self.assertEqual(find_json_object(raw), '{"name": "A {not a brace}", "skills": []}')

    def test_trailing_commas_and_bare_keys(self):
        self.assertEqual(
            parse_model_json('{name: "Bob", skills: ["Go",],}'),
            {"name": "Bob", "skills": ["Go"]},
        )

    def test_repair_leaves_string_contents_alone(self):
        text = '{"summary": "Lead, then: manager,}", tags: ["a",]}'
        self.assertEqual(repair_json(text), '{"summary": "Lead, then: manager,}", "tags": ["a"]}')

    def test_nested_fenced_payload(self):
        raw = '```JSON\n{"work_experience": [{"role": "Dev", "company": "X",}]}\n```'
        self.assertEqual(
            parse_model_json(raw),
            {"work_experience": [{"role": "Dev", "company": "X"}]},
        )

    def test_garbage_raises(self):
        for raw in ("", "I could not read this resume.", "{ this is not json at all }"):
            with self.subTest(raw=raw):
                with self.assertRaises(ModelResponseError):
                    parse_model_json(raw)


if __name__ == "__main__":
    unittest.main()
