"""Tests for the generic authorization pipeline stages."""

import pytest

from developer_portal_api.app.services.outcomes import Forbidden, InternalError, JsonSuccess, NotFound, Ok
from developer_portal_api.app.services.pipeline import (
    check_admin,
    check_subscription,
    resolve_user,
    run_pipeline,
)

from conftest import ADMIN, OWNER


class TestRunPipeline:
    @pytest.mark.asyncio
    async def test_threads_values_through_stages(self):
        async def add_one(value):
            return Ok(value + 1)

        async def done(value):
            return JsonSuccess(value * 10)

        outcome = await run_pipeline(1, add_one, add_one, done)
        assert outcome == JsonSuccess(30)

    @pytest.mark.asyncio
    async def test_stops_at_first_error(self):
        ran = []

        async def fail(value):
            ran.append("fail")
            return NotFound("missing", "gone")

        async def never(value):
            ran.append("never")
            return Ok(value)

        outcome = await run_pipeline("seed", fail, never)
        assert outcome == NotFound("missing", "gone")
        assert ran == ["fail"]

    @pytest.mark.asyncio
    async def test_no_stages_returns_seed(self):
        assert await run_pipeline("seed") == Ok("seed")


class TestResolveUser:
    @pytest.mark.asyncio
    async def test_uses_primary_email(self, apim, owner_caller):
        outcome = await resolve_user(apim, owner_caller)
        assert outcome == Ok(OWNER)
        assert apim.calls == [("get_user_by_email", (OWNER.email,))]

    @pytest.mark.asyncio
    async def test_unknown_user_is_not_found(self, apim, unknown_caller):
        outcome = await resolve_user(apim, unknown_caller)
        assert isinstance(outcome, NotFound)
        assert outcome.title == "API user not found"

    @pytest.mark.asyncio
    async def test_backend_error_is_internal_error(self, apim, owner_caller):
        apim.error = {"status_code": 503, "message": "unavailable"}
        outcome = await resolve_user(apim, owner_caller)
        assert outcome == InternalError("unavailable")

    @pytest.mark.asyncio
    async def test_raised_exception_is_internal_error(self, apim, owner_caller):
        def boom(email):
            raise ConnectionError("connection reset")

        apim.get_user_by_email = boom
        outcome = await resolve_user(apim, owner_caller)
        assert outcome == InternalError("connection reset")


class TestCheckSubscription:
    @pytest.mark.asyncio
    async def test_owner_passes_with_user_filter(self, apim):
        outcome = await check_subscription(apim, "S1", OWNER)
        assert outcome == Ok(OWNER)
        assert apim.calls == [("get_user_subscription", ("S1", OWNER.id))]

    @pytest.mark.asyncio
    async def test_admin_skips_user_filter(self, apim):
        outcome = await check_subscription(apim, "S3", ADMIN)
        assert outcome == Ok(ADMIN)
        assert apim.calls == [("get_subscription", ("S3",))]

    @pytest.mark.asyncio
    async def test_foreign_subscription_is_not_found(self, apim):
        outcome = await check_subscription(apim, "S3", OWNER)
        assert outcome == NotFound("Subscription not found", "Cannot get a subscription for the logged in user")

    @pytest.mark.asyncio
    async def test_missing_subscription_is_not_found_for_admin(self, apim):
        outcome = await check_subscription(apim, "missing", ADMIN)
        assert isinstance(outcome, NotFound)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("user", [OWNER, ADMIN])
    async def test_backend_error_is_internal_error(self, apim, user):
        apim.subscription_error = {"status_code": 503, "message": "apim down"}
        outcome = await check_subscription(apim, "S1", user)
        assert outcome == InternalError("apim down")

    @pytest.mark.asyncio
    async def test_raised_exception_is_internal_error(self, apim):
        def boom(subscription_id, user_id):
            raise ConnectionError("connection reset")

        apim.get_user_subscription = boom
        outcome = await check_subscription(apim, "S1", OWNER)
        assert outcome == InternalError("connection reset")


class TestCheckAdmin:
    @pytest.mark.asyncio
    async def test_admin_passes(self):
        assert await check_admin(ADMIN) == Ok(ADMIN)

    @pytest.mark.asyncio
    async def test_non_admin_is_forbidden(self):
        outcome = await check_admin(OWNER)
        assert outcome == Forbidden()
        assert outcome.title == "You are not allowed here"
