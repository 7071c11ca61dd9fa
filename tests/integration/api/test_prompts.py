"""Integration tests for prompt management and activation over HTTP."""

from uuid import UUID

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.prompts.models import ActivePromptBinding


pytestmark = pytest.mark.integration

PROMPTS_URL = "/api/v1/prompts"
PURPOSE = "response_generation"


async def _bindings_for(db: AsyncSession, technician_id: UUID) -> list[tuple]:
    """(prompt_id, is_active) rows straight from the store."""
    result = await db.execute(
        select(ActivePromptBinding.prompt_id, ActivePromptBinding.is_active).where(
            ActivePromptBinding.technician_id == technician_id
        )
    )
    return [tuple(row) for row in result.all()]


async def _activate(client: AsyncClient, launch, prompt_id, **body):
    return await client.post(
        f"{PROMPTS_URL}/{prompt_id}/activate",
        params=launch.params,
        json=body or None,
    )


class TestActivation:
    """Tests for POST /api/v1/prompts/{id}/activate."""

    async def test_activating_second_system_prompt_flips_binding(
        self, client: AsyncClient, db: AsyncSession, tenant, technician_launch,
        make_prompt,
    ):
        first = await make_prompt(tenant)
        second = await make_prompt(tenant)

        response = await _activate(client, technician_launch, first.id, purpose=PURPOSE)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["active_binding"]["prompt_id"] == str(first.id)
        assert data["active_binding"]["technician_id"] == str(
            technician_launch.technician.id
        )
        assert data["active_binding"]["purpose"] == PURPOSE
        assert data["active_binding"]["is_active"] is True
        assert data["config_content"] == first.content

        response = await _activate(
            client, technician_launch, second.id, purpose=PURPOSE
        )

        assert response.status_code == 200
        rows = await _bindings_for(db, technician_launch.technician.id)
        active = [prompt_id for prompt_id, is_active in rows if is_active]
        assert active == [second.id]
        assert (first.id, False) in rows

    async def test_other_technicians_personal_prompt_is_forbidden(
        self, client: AsyncClient, db: AsyncSession, tenant, technician_launch,
        manager_launch, make_prompt,
    ):
        personal = await make_prompt(tenant, owner=manager_launch.technician)

        response = await _activate(client, technician_launch, personal.id)

        assert response.status_code == 403
        assert response.json()["success"] is False
        assert await _bindings_for(db, technician_launch.technician.id) == []

    async def test_own_personal_prompt_can_be_activated(
        self, client: AsyncClient, tenant, technician_launch, make_prompt
    ):
        personal = await make_prompt(tenant, owner=technician_launch.technician)

        response = await _activate(client, technician_launch, personal.id)

        assert response.status_code == 200

    async def test_reactivating_active_prompt_is_a_no_op(
        self, client: AsyncClient, db: AsyncSession, tenant, technician_launch,
        make_prompt,
    ):
        prompt = await make_prompt(tenant)

        first = await _activate(client, technician_launch, prompt.id)
        again = await _activate(client, technician_launch, prompt.id)

        assert first.status_code == again.status_code == 200
        assert (
            first.json()["data"]["active_binding"]["id"]
            == again.json()["data"]["active_binding"]["id"]
        )
        assert await _bindings_for(db, technician_launch.technician.id) == [
            (prompt.id, True)
        ]

    async def test_switching_back_reuses_existing_binding(
        self, client: AsyncClient, db: AsyncSession, tenant, technician_launch,
        make_prompt,
    ):
        first = await make_prompt(tenant)
        second = await make_prompt(tenant)

        await _activate(client, technician_launch, first.id)
        await _activate(client, technician_launch, second.id)
        await _activate(client, technician_launch, first.id)

        rows = sorted(await _bindings_for(db, technician_launch.technician.id))
        assert sorted([(first.id, True), (second.id, False)]) == rows

    async def test_other_technicians_bindings_are_untouched(
        self, client: AsyncClient, db: AsyncSession, tenant, technician_launch,
        manager_launch, make_prompt,
    ):
        mine = await make_prompt(tenant)
        theirs = await make_prompt(tenant)

        await _activate(client, technician_launch, mine.id)
        await _activate(client, manager_launch, theirs.id)

        assert await _bindings_for(db, technician_launch.technician.id) == [
            (mine.id, True)
        ]
        assert await _bindings_for(db, manager_launch.technician.id) == [
            (theirs.id, True)
        ]

    async def test_activation_for_someone_else_is_forbidden(
        self, client: AsyncClient, db: AsyncSession, tenant, technician_launch,
        manager_launch, make_prompt,
    ):
        prompt = await make_prompt(tenant)

        response = await _activate(
            client,
            manager_launch,
            prompt.id,
            technician_id=str(technician_launch.technician.id),
        )

        assert response.status_code == 403
        assert await _bindings_for(db, technician_launch.technician.id) == []

    async def test_prompt_of_another_tenant_is_not_found(
        self, client: AsyncClient, other_tenant, technician_launch, make_prompt
    ):
        foreign = await make_prompt(other_tenant)

        response = await _activate(client, technician_launch, foreign.id)

        assert response.status_code == 404

    async def test_unauthenticated_activation_is_rejected(
        self, client: AsyncClient, tenant, make_prompt
    ):
        prompt = await make_prompt(tenant)

        response = await client.post(f"{PROMPTS_URL}/{prompt.id}/activate")

        assert response.status_code == 400


class TestActivePrompt:
    """Tests for GET /api/v1/prompts/active/{purpose}."""

    async def test_nothing_active(self, client: AsyncClient, technician_launch):
        response = await client.get(
            f"{PROMPTS_URL}/active/{PURPOSE}", params=technician_launch.params
        )

        assert response.status_code == 404
        assert response.json()["message"] == "No active prompt"

    async def test_returns_active_prompt(
        self, client: AsyncClient, tenant, technician_launch, make_prompt
    ):
        prompt = await make_prompt(tenant)
        await _activate(client, technician_launch, prompt.id)

        response = await client.get(
            f"{PROMPTS_URL}/active/{PURPOSE}", params=technician_launch.params
        )

        assert response.status_code == 200
        assert response.json()["data"]["id"] == str(prompt.id)


class TestListing:
    """Tests for GET /api/v1/prompts."""

    async def test_technician_sees_system_and_own_prompts(
        self, client: AsyncClient, tenant, technician_launch, manager_launch,
        make_prompt,
    ):
        system = await make_prompt(tenant)
        mine = await make_prompt(tenant, owner=technician_launch.technician)
        await make_prompt(tenant, owner=manager_launch.technician)
        await _activate(client, technician_launch, mine.id)

        response = await client.get(PROMPTS_URL, params=technician_launch.params)

        assert response.status_code == 200
        items = {item["id"]: item for item in response.json()["data"]}
        assert set(items) == {str(system.id), str(mine.id)}
        assert items[str(system.id)]["is_system"] is True
        assert items[str(system.id)]["is_active"] is False
        assert items[str(system.id)]["can_edit"] is False
        assert items[str(mine.id)]["is_system"] is False
        assert items[str(mine.id)]["is_active"] is True
        assert items[str(mine.id)]["can_edit"] is True

    async def test_manager_sees_all_and_annotates_for_technician(
        self, client: AsyncClient, tenant, technician_launch, manager_launch,
        make_prompt,
    ):
        system = await make_prompt(tenant)
        await make_prompt(tenant, owner=technician_launch.technician)
        await make_prompt(tenant, owner=manager_launch.technician)
        await _activate(client, technician_launch, system.id)

        response = await client.get(
            PROMPTS_URL,
            params={
                **manager_launch.params,
                "technician_id": str(technician_launch.technician.id),
            },
        )

        assert response.status_code == 200
        items = response.json()["data"]
        assert len(items) == 3
        active = [item["id"] for item in items if item["is_active"]]
        assert active == [str(system.id)]
        assert all(item["can_edit"] for item in items)

    async def test_technician_cannot_list_for_someone_else(
        self, client: AsyncClient, technician_launch, manager_launch
    ):
        response = await client.get(
            PROMPTS_URL,
            params={
                **technician_launch.params,
                "technician_id": str(manager_launch.technician.id),
            },
        )

        assert response.status_code == 403

    async def test_other_tenants_prompts_are_invisible(
        self, client: AsyncClient, other_tenant, technician_launch, make_prompt
    ):
        await make_prompt(other_tenant)

        response = await client.get(PROMPTS_URL, params=technician_launch.params)

        assert response.json()["data"] == []


class TestCreateAndEdit:
    """Tests for POST /api/v1/prompts and PUT /api/v1/prompts/{id}."""

    async def test_technician_creates_personal_prompt(
        self, client: AsyncClient, technician_launch
    ):
        response = await client.post(
            PROMPTS_URL,
            params=technician_launch.params,
            json={"name": "Short", "content": "Keep it short.", "is_system": True},
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["owner_technician_id"] == str(technician_launch.technician.id)
        assert data["created_by"] == "Terry Tech"
        assert data["version"] == 1

    async def test_manager_creates_system_prompt(
        self, client: AsyncClient, manager_launch
    ):
        response = await client.post(
            PROMPTS_URL,
            params=manager_launch.params,
            json={"name": "House", "content": "House style.", "is_system": True},
        )

        assert response.status_code == 201
        assert response.json()["data"]["owner_technician_id"] is None

    async def test_invalid_body_is_validation_error(
        self, client: AsyncClient, technician_launch
    ):
        response = await client.post(
            PROMPTS_URL, params=technician_launch.params, json={"name": ""}
        )

        assert response.status_code == 422
        body = response.json()
        assert body["error_code"] == "validation_error"
        assert {error["field"] for error in body["errors"]} >= {"name", "content"}

    async def test_owner_edit_bumps_version(
        self, client: AsyncClient, tenant, technician_launch, make_prompt
    ):
        prompt = await make_prompt(tenant, owner=technician_launch.technician)

        response = await client.put(
            f"{PROMPTS_URL}/{prompt.id}",
            params=technician_launch.params,
            json={"content": "Updated."},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["content"] == "Updated."
        assert data["version"] == 2

    @pytest.mark.parametrize("field", ["name", "content"])
    async def test_null_name_or_content_is_validation_error(
        self, client: AsyncClient, tenant, technician_launch, make_prompt, field
    ):
        prompt = await make_prompt(tenant, owner=technician_launch.technician)

        response = await client.put(
            f"{PROMPTS_URL}/{prompt.id}",
            params=technician_launch.params,
            json={field: None},
        )

        assert response.status_code == 422
        assert response.json()["errors"][0]["field"] == field
        assert prompt.version == 1

    async def test_technician_cannot_edit_system_prompt(
        self, client: AsyncClient, tenant, technician_launch, make_prompt
    ):
        prompt = await make_prompt(tenant)

        response = await client.put(
            f"{PROMPTS_URL}/{prompt.id}",
            params=technician_launch.params,
            json={"content": "Mine now."},
        )

        assert response.status_code == 403

    async def test_manager_edits_system_prompt(
        self, client: AsyncClient, tenant, manager_launch, make_prompt
    ):
        prompt = await make_prompt(tenant)

        response = await client.put(
            f"{PROMPTS_URL}/{prompt.id}",
            params=manager_launch.params,
            json={"name": "Renamed"},
        )

        assert response.status_code == 200
        assert response.json()["data"]["version"] == 2

    async def test_get_other_technicians_prompt_is_forbidden(
        self, client: AsyncClient, tenant, technician_launch, manager_launch,
        make_prompt,
    ):
        prompt = await make_prompt(tenant, owner=manager_launch.technician)

        response = await client.get(
            f"{PROMPTS_URL}/{prompt.id}", params=technician_launch.params
        )

        assert response.status_code == 403
