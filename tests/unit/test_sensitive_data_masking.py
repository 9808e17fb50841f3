import pytest

pytestmark = pytest.mark.unit


class TestSensitiveDataMasking:
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

    def test_authorization_header_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "raw": "Authorization: Bearer-eyJhbGciOi"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "eyJhbGciOi" not in result["raw"]

    def test_api_key_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "raw": "api_key=live_42"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "live_42" not in result["raw"]

    def test_non_sensitive_data_unchanged(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "order.created", "order_number": "ORD20250101120000ABCDEF"}
        result = mask_sensitive_data(None, None, event_dict)
        assert result["order_number"] == "ORD20250101120000ABCDEF"
        assert result["event"] == "order.created"

    def test_non_string_values_untouched(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "quantity": 3}
        assert mask_sensitive_data(None, None, event_dict)["quantity"] == 3
