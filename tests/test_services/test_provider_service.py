"""Tests for the provider service."""

import asyncio

import pytest


@pytest.mark.unit
class TestProviderService:
    """Tests for ProviderService."""

    async def test_instance_cached(self, provider_service):
        """Test the same provider instance is returned for any casing."""
        first = provider_service.get_provider("stub")

        assert provider_service.get_provider("STUB") is first

    async def test_unknown_provider(self, provider_service):
        """Test an unknown name raises NotFoundError."""
        from modelprobe.core.exceptions import NotFoundError

        with pytest.raises(NotFoundError):
            provider_service.get_provider("acme")

    async def test_missing_key(self, provider_service, monkeypatch):
        """Test a provider without key raises ConfigurationError."""
        from modelprobe.core.exceptions import ConfigurationError

        monkeypatch.delenv("STUB_API_KEY")

        with pytest.raises(ConfigurationError):
            provider_service.get_provider("stub")

    async def test_providers_setting_filters(self, provider_service, monkeypatch):
        """Test PROVIDERS restricts the exposed providers."""
        from modelprobe.core.config import settings
        from modelprobe.core.exceptions import NotFoundError

        monkeypatch.setattr(settings, "PROVIDERS", "openai")

        assert provider_service.available() == []
        with pytest.raises(NotFoundError):
            provider_service.get_provider("stub")

    async def test_list_configured(self, provider_service):
        """Test key status and initialization are reported."""
        assert provider_service.list_configured() == [
            {"name": "stub", "configured": True, "initialized": False}
        ]
        provider_service.get_provider("stub")
        assert provider_service.list_configured()[0]["initialized"] is True

    async def test_validate(self, provider_service):
        """Test validation returns the registry and no validation error."""
        registry, validation_error = await provider_service.validate("stub", timeout_s=5)

        assert validation_error is None
        assert len(registry.working()) == 2
        assert registry is provider_service.get_provider("stub").get_endpoints()

    async def test_overlapping_validations(self, provider_service):
        """Test concurrent validations of one provider both complete."""
        results = await asyncio.gather(
            provider_service.validate("stub"),
            provider_service.validate("stub"),
        )

        assert results[0][0] is results[1][0]
        assert len(results[0][0].failed()) == 1

    async def test_validate_critical(self, provider_service):
        """Test a critical failure is returned, not raised."""
        provider = provider_service.get_provider("stub")
        provider.get_endpoints()[2].critical = True

        registry, validation_error = await provider_service.validate("stub")

        assert validation_error.startswith("critical endpoint failed: GET /status/{id}")
        assert len(registry.failed()) == 1

    async def test_validate_all_failed(self, provider_service):
        """Test a provider requiring one working endpoint reports total failure."""
        from modelprobe.core.exceptions import ProviderError

        provider = provider_service.get_provider("stub")
        provider.fail_if_all_failed = True

        async def unreachable(endpoint, ctx):
            raise ProviderError("stub", "request failed: connection refused")

        provider.probe_endpoint = unreachable

        registry, validation_error = await provider_service.validate("stub")

        assert validation_error == "all endpoints failed: Provider error (stub): request failed: connection refused"
        assert len(registry.failed()) == 3

    async def test_validate_all_failed_without_policy(self, provider_service):
        """Test total failure is not an error for providers without the policy."""
        from modelprobe.core.exceptions import ProviderError

        provider = provider_service.get_provider("stub")

        async def unreachable(endpoint, ctx):
            raise ProviderError("stub", "request failed: connection refused")

        provider.probe_endpoint = unreachable

        registry, validation_error = await provider_service.validate("stub")

        assert validation_error is None
        assert len(registry.failed()) == 3

    async def test_validate_after_locks_dropped(self, provider_service):
        """Test validation recreates a provider lock that was cleared underneath it."""
        provider_service.get_provider("stub")
        provider_service._validation_locks.clear()

        registry, validation_error = await provider_service.validate("stub")

        assert validation_error is None
        assert len(registry.working()) == 2
        assert "stub" in provider_service._validation_locks

    async def test_list_models(self, provider_service):
        """Test models are listed through the provider."""
        models = await provider_service.list_models("stub")

        assert [m.id for m in models] == ["stub-small", "stub-large"]

    async def test_test_model_success(self, provider_service):
        """Test a working model reports success."""
        result = await provider_service.test_model("stub", "stub-small")

        assert result.success is True
        assert result.message == "Model is working"
        assert result.to_dict()["provider"] == "stub"

    async def test_test_model_failure(self, provider_service):
        """Test a failing model is reported with the upstream error."""
        result = await provider_service.test_model("stub", "broken")

        assert result.success is False
        assert "HTTP 500: model unavailable" in result.message

    async def test_close_all(self, provider_service):
        """Test closing drops cached instances."""
        provider_service.get_provider("stub")
        await provider_service.close_all()

        assert provider_service.list_configured()[0]["initialized"] is False
