"""
Tests for credential masking in logs and call log snapshots.
"""
from app.core.logging_utils import MASK, mask_headers, mask_sensitive_data, sanitize_log_message


class TestMaskSensitiveData:
    """Tests for mask_sensitive_data."""

    def test_masks_credential_keys(self):
        data = {"apiKey": "anything", "password": "hunter2", "keyHash": "abc"}

        assert mask_sensitive_data(data) == {"apiKey": MASK, "password": MASK, "keyHash": MASK}

    def test_masks_issued_key_values_anywhere(self):
        data = {"note": "oc_live_0123", "items": ["ok", "oc_live_4567"]}

        masked = mask_sensitive_data(data)

        assert masked["note"] == MASK
        assert masked["items"] == ["ok", MASK]

    def test_keeps_ordinary_fields(self):
        data = {"jobId": "3f0c2a1e-9a57-4d8e-bb0b-6f3c1d2e4a5b", "bidAmount": 200, "coverLetter": "Hi"}

        assert mask_sensitive_data(data) == data

    def test_keeps_request_id(self):
        assert mask_sensitive_data({"request_id": "abc"}) == {"request_id": "abc"}

    def test_partially_masks_email(self):
        assert mask_sensitive_data({"email": "alexander@example.com"}) == {"email": "ale***@example.com"}


class TestMaskHeaders:
    """Tests for mask_headers."""

    def test_masks_auth_headers(self):
        headers = {"X-API-Key": "oc_live_x", "Authorization": "Bearer y", "Accept": "application/json"}

        masked = mask_headers(headers)

        assert masked["X-API-Key"] == MASK
        assert masked["Authorization"] == MASK
        assert masked["Accept"] == "application/json"


class TestSanitizeLogMessage:
    """Tests for sanitize_log_message."""

    def test_request_id_goes_last(self):
        message = sanitize_log_message("Job created", RequestID="req-1", JobID="j1")

        assert message == "Job created | JobID: j1 | RequestID: req-1"

    def test_credentials_masked_in_context(self):
        message = sanitize_log_message("Auth", Token="oc_live_secret")

        assert "oc_live_secret" not in message
        assert MASK in message
