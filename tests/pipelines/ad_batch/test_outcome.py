"""
Tests for run_step - typed step outcomes.
"""

import httpx
import pytest
from unittest.mock import AsyncMock

from adlauncher.pipelines.ad_batch.outcome import StepFailed, StepOk, run_step
from adlauncher.services.exceptions import (
    AdCreationError,
    CreativeRejectedError,
    MetaApiError,
    NoMediaResolvedError,
)


class TestRunStep:

    @pytest.mark.asyncio
    async def test_value_is_wrapped(self):
        result = await run_step("create_ad", AsyncMock(return_value="ad_1"), AdCreationError)
        assert result == StepOk("ad_1")

    @pytest.mark.asyncio
    async def test_group_error_passes_through(self):
        error = NoMediaResolvedError("promo")

        result = await run_step("resolve_media", AsyncMock(side_effect=error), AdCreationError)

        assert isinstance(result, StepFailed)
        assert result.step == "resolve_media"
        assert result.error is error
        assert result.message == "No media could be resolved for ad 'promo'"

    @pytest.mark.asyncio
    async def test_meta_api_error_is_typed(self):
        call = AsyncMock(side_effect=MetaApiError("Invalid", error_user_msg="Image too small"))

        result = await run_step("create_creative", call, CreativeRejectedError)

        assert isinstance(result.error, CreativeRejectedError)
        assert result.message == "Image too small"

    @pytest.mark.asyncio
    async def test_transport_error_is_typed(self):
        call = AsyncMock(side_effect=httpx.ReadTimeout("timed out"))

        result = await run_step("create_ad", call, AdCreationError)

        assert isinstance(result.error, AdCreationError)
        assert "ReadTimeout" in result.message

    @pytest.mark.asyncio
    async def test_unexpected_error_becomes_typed_failure(self):
        result = await run_step("create_ad", AsyncMock(side_effect=KeyError("id")), AdCreationError)

        assert isinstance(result, StepFailed)
        assert isinstance(result.error, AdCreationError)
        assert result.message == "KeyError: 'id'"
