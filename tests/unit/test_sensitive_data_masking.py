import pytest

pytestmark = pytest.mark.unit


class TestSensitiveDataMasking:
    def test_phone_with_country_code_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "contact": "call +502 5555-1234 please"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "5555-1234" not in result["contact"]
        assert "***MASKED***" in result["contact"]

    def test_phone_key_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "telefono": "55551234"}
        result = mask_sensitive_data(None, None, event_dict)
        assert result["telefono"] == "***MASKED***"

    def test_password_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "data": "password='s3cret123'"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "s3cret123" not in result["data"]
        assert "***MASKED***" in result["data"]

    def test_token_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "header": "token=abc123xyz"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "abc123xyz" not in result["header"]
        assert "***MASKED***" in result["header"]

    def test_folio_not_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "order.created", "folio": "20260305-1234"}
        result = mask_sensitive_data(None, None, event_dict)
        assert result["folio"] == "20260305-1234"
        assert result["event"] == "order.created"
