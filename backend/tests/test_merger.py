import unittest

from resume_analyzer.exceptions import ModelResponseError
from resume_analyzer.services import extractors
from resume_analyzer.services.merger import (
    build_heuristic_profile, merge_with_heuristics, validate_model_payload
)
from resume_analyzer.services.scoring import MAX_UPSKILL_SUGGESTIONS, compute_rating

from support import SAMPLE_RESUME

PROFILE_KEYS = {
    "name", "email", "phone", "linkedin_url", "portfolio_url", "summary", "work_experience",
    "education", "technical_skills", "soft_skills", "projects", "certifications",
    "resume_rating", "improvement_areas", "upskill_suggestions",
}


class HeuristicProfileTests(unittest.TestCase):
    def test_profile_is_complete(self):
        profile = build_heuristic_profile(SAMPLE_RESUME)
        self.assertEqual(set(profile.model_dump()), PROFILE_KEYS)
        self.assertEqual(profile.name, "Jane Smith")
        self.assertEqual(profile.email, "jane.smith@example.com")
        self.assertEqual(profile.technical_skills, ["Python", "Docker"])
        self.assertTrue(1 <= profile.resume_rating <= 10)
        self.assertLessEqual(len(profile.upskill_suggestions), MAX_UPSKILL_SUGGESTIONS)

    def test_degenerate_text_still_yields_profile(self):
        for text in ("", "   \n  ", "Lorem ipsum dolor sit amet " * 4000):
            with self.subTest(length=len(text)):
                profile = build_heuristic_profile(text)
                self.assertEqual(set(profile.model_dump()), PROFILE_KEYS)
                self.assertTrue(profile.summary)
                self.assertTrue(profile.improvement_areas)
                self.assertTrue(1 <= profile.resume_rating <= 10)

    def test_idempotent(self):
        self.assertEqual(build_heuristic_profile(SAMPLE_RESUME), build_heuristic_profile(SAMPLE_RESUME))


class PayloadValidationTests(unittest.TestCase):
    def test_rejects_non_object(self):
        with self.assertRaises(ModelResponseError):
            validate_model_payload(["not", "an", "object"])

    def test_camel_case_keys_accepted(self):
        payload = validate_model_payload({
            "linkedinUrl": "https://linkedin.com/in/jd",
            "technicalSkills": ["Go"],
            "resumeRating": 7,
        })
        self.assertEqual(payload.linkedin_url, "https://linkedin.com/in/jd")
        self.assertEqual(payload.technical_skills, ["Go"])
        self.assertEqual(payload.resume_rating, 7)

    def test_wrong_shapes_are_dropped(self):
        payload = validate_model_payload({
            "name": "Jane",
            "technical_skills": {"not": "a list"},
            "resume_rating": True,
            "education": "MIT",
            "phone": 5551234567,
        })
        self.assertEqual(payload.name, "Jane")
        self.assertIsNone(payload.technical_skills)
        self.assertIsNone(payload.resume_rating)
        self.assertIsNone(payload.education)
        self.assertEqual(payload.phone, "5551234567")


class MergeTests(unittest.TestCase):
    def test_model_values_win_when_present(self):
        payload = validate_model_payload({
            "name": "Janet S.",
            "summary": "Backend engineer.",
            "technical_skills": ["Go", "Go", "Rust"],
            "resume_rating": 9,
        })
        profile = merge_with_heuristics(payload, SAMPLE_RESUME)
        self.assertEqual(profile.name, "Janet S.")
        self.assertEqual(profile.summary, "Backend engineer.")
        self.assertEqual(profile.technical_skills, ["Go", "Rust"])
        self.assertEqual(profile.resume_rating, 9)

    def test_missing_values_fall_back_to_heuristics(self):
        payload = validate_model_payload({"name": "  ", "email": None})
        profile = merge_with_heuristics(payload, SAMPLE_RESUME)
        heuristic = build_heuristic_profile(SAMPLE_RESUME)
        self.assertEqual(profile, heuristic)

    def test_empty_lists_from_model_are_kept(self):
        payload = validate_model_payload({"certifications": [], "projects": []})
        profile = merge_with_heuristics(payload, "Certifications\nAWS Certified Developer\n" + SAMPLE_RESUME)
        self.assertEqual(profile.certifications, [])
        self.assertEqual(profile.projects, [])

    def test_rating_is_clamped(self):
        for raw, expected in ((15, 10), (0, 1), ("7", 7), (6.4, 6)):
            with self.subTest(raw=raw):
                profile = merge_with_heuristics(validate_model_payload({"resume_rating": raw}), SAMPLE_RESUME)
                self.assertEqual(profile.resume_rating, expected)

    def test_non_numeric_rating_uses_heuristic(self):
        profile = merge_with_heuristics(validate_model_payload({"resume_rating": "great"}), SAMPLE_RESUME)
        self.assertEqual(profile.resume_rating, compute_rating(SAMPLE_RESUME))

    def test_upskill_suggestions_capped(self):
        payload = validate_model_payload({"upskill_suggestions": [f"Skill {i}" for i in range(8)]})
        profile = merge_with_heuristics(payload, SAMPLE_RESUME)
        self.assertEqual(len(profile.upskill_suggestions), MAX_UPSKILL_SUGGESTIONS)

    def test_partial_nested_entries_get_placeholders(self):
        payload = validate_model_payload({
            "workExperience": [{"role": "Developer", "description": "Built APIs"}],
            "education": [{"degree": "BSc", "graduationYear": 2015}],
        })
        profile = merge_with_heuristics(payload, SAMPLE_RESUME)
        job = profile.work_experience[0]
        self.assertEqual(job.company, extractors.DEFAULT_COMPANY)
        self.assertEqual(job.duration, extractors.DEFAULT_DURATION)
        self.assertEqual(job.description, ["Built APIs"])
        self.assertEqual(profile.education[0].institution, extractors.DEFAULT_INSTITUTION)
        self.assertEqual(profile.education[0].graduation_year, "2015")


if __name__ == "__main__":
    unittest.main()
