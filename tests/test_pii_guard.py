import unittest

from src.interviewflow.pii_guard import redact_payload, redact_text


class TestPiiGuard(unittest.TestCase):
    def test_redact_text_masks_email_and_phone(self):
        txt = "Reach me at jordan@example.com or +1 (555) 123-4567"
        redacted = redact_text(txt)
        self.assertNotIn("jordan@example.com", redacted)
        self.assertNotIn("123-4567", redacted)
        self.assertIn("[REDACTED_EMAIL]", redacted)
        self.assertIn("[REDACTED_PHONE]", redacted)

    def test_short_numbers_are_kept(self):
        self.assertEqual(redact_text("I'd rate it 7 out of 10"), "I'd rate it 7 out of 10")

    def test_redact_payload_masks_sensitive_keys(self):
        payload = {
            "full_name": "Jordan Lee",
            "raw_answer": "email jordan@x.com",
            "question_index": 3,
        }
        redacted = redact_payload(payload)
        self.assertEqual(redacted["full_name"], "[REDACTED]")
        self.assertNotIn("jordan@x.com", redacted["raw_answer"])
        self.assertEqual(redacted["question_index"], 3)

    def test_redact_payload_descends_into_nested_values(self):
        payload = {
            "followup_exchanges": [{"question": "Best contact?", "answer": "5551234567"}],
        }
        redacted = redact_payload(payload)
        self.assertEqual(redacted["followup_exchanges"][0]["answer"], "[REDACTED_PHONE]")
        self.assertEqual(redacted["followup_exchanges"][0]["question"], "Best contact?")


if __name__ == "__main__":
    unittest.main()
