"""Tests for the Camper Directory."""

from __future__ import annotations

import pytest

from campreg.core.exceptions import (
    DuplicateAmkaError,
    ErrorKind,
    ImmutableFieldChangeError,
    InvalidFormatError,
    NotFoundError,
    ReferentialConflictError,
)
from campreg.models.camper import CamperUpdate
from campreg.services.camper_service import CamperService
from campreg.storage.constraints import CAMPERS


class TestCreateCamper:
    """Test camper creation."""

    @pytest.mark.asyncio
    async def test_create_camper_sets_owner_as_parent(
        self, make_user, camper_service: CamperService, build_camper
    ) -> None:
        parent = await make_user("parenta", "11111111111")

        camper = await camper_service.create_camper(
            build_camper("22222222222"), parent.id
        )

        assert camper.parent is not None
        assert camper.parent.id == parent.id
        assert camper.parent.username == "parenta"
        assert camper.amka == "22222222222"

    @pytest.mark.asyncio
    async def test_create_camper_ignores_supplied_parent(
        self, make_user, camper_service: CamperService, build_camper
    ) -> None:
        parent = await make_user("parenta", "11111111111")
        other = await make_user("parentb", "33333333333")

        camper = await camper_service.create_camper(
            build_camper("22222222222", parent=other.id), parent.id
        )

        assert camper.parent is not None
        assert camper.parent.id == parent.id

    @pytest.mark.asyncio
    async def test_parent_summary_never_exposes_password(
        self, make_user, make_camper
    ) -> None:
        parent = await make_user("parenta", "11111111111")

        camper = await make_camper(parent.id, "22222222222")

        dumped = camper.model_dump()
        assert "password" not in dumped["parent"]
        assert "password_hash" not in dumped["parent"]

    @pytest.mark.asyncio
    async def test_duplicate_camper_amka_rejected(self, make_user, make_camper) -> None:
        parent = await make_user("parenta", "11111111111")
        await make_camper(parent.id, "22222222222")

        with pytest.raises(DuplicateAmkaError) as exc_info:
            await make_camper(parent.id, "22222222222", full_name="Eleni Papadopoulou")

        assert exc_info.value.error_code == ErrorKind.DUPLICATE_AMKA
        assert exc_info.value.message == "Camper with this AMKA already exists"

    @pytest.mark.asyncio
    async def test_unknown_owner_rejected(self, make_camper) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            await make_camper("missing-user", "22222222222")

        assert exc_info.value.entity == "User"

    @pytest.mark.asyncio
    async def test_store_constraint_rejects_concurrent_duplicate(
        self, make_user, make_camper, camper_service: CamperService, monkeypatch
    ) -> None:
        """The unique index rejects a duplicate the service check missed."""
        parent = await make_user("parenta", "11111111111")
        await make_camper(parent.id, "22222222222")

        store = camper_service._store
        original_find_one = store.find_one

        async def blind_find_one(collection, filters, **kwargs):
            if collection == CAMPERS:
                return None
            return await original_find_one(collection, filters, **kwargs)

        monkeypatch.setattr(store, "find_one", blind_find_one)

        with pytest.raises(DuplicateAmkaError):
            await make_camper(parent.id, "22222222222")
        assert await store.count(CAMPERS) == 1


class TestUpdateCamper:
    """Test camper updates."""

    @pytest.mark.asyncio
    async def test_update_fields(
        self, make_user, make_camper, camper_service: CamperService
    ) -> None:
        parent = await make_user("parenta", "11111111111")
        camper = await make_camper(parent.id, "22222222222")

        updated = await camper_service.update_camper(
            camper.id, CamperUpdate(full_name="Nikolaos Papadopoulos")
        )

        assert updated.full_name == "Nikolaos Papadopoulos"
        assert updated.amka == "22222222222"

    @pytest.mark.asyncio
    async def test_update_to_own_amka_allowed(
        self, make_user, make_camper, camper_service: CamperService
    ) -> None:
        parent = await make_user("parenta", "11111111111")
        camper = await make_camper(parent.id, "22222222222")

        updated = await camper_service.update_camper(
            camper.id, CamperUpdate(amka="22222222222")
        )

        assert updated.amka == "22222222222"

    @pytest.mark.asyncio
    async def test_update_to_other_campers_amka_rejected(
        self, make_user, make_camper, camper_service: CamperService
    ) -> None:
        parent = await make_user("parenta", "11111111111")
        await make_camper(parent.id, "22222222222")
        second = await make_camper(parent.id, "44444444444")

        with pytest.raises(DuplicateAmkaError) as exc_info:
            await camper_service.update_camper(
                second.id, CamperUpdate(amka="22222222222")
            )

        assert exc_info.value.message == "Another camper already has this AMKA"

    @pytest.mark.asyncio
    async def test_parent_change_rejected(
        self, make_user, make_camper, camper_service: CamperService
    ) -> None:
        parent = await make_user("parenta", "11111111111")
        other = await make_user("parentb", "33333333333")
        camper = await make_camper(parent.id, "22222222222")

        with pytest.raises(ImmutableFieldChangeError):
            await camper_service.update_camper(camper.id, CamperUpdate(parent=other.id))

        stored = await camper_service.find_by_id(camper.id)
        assert stored is not None
        assert stored.parent is not None
        assert stored.parent.id == parent.id

    @pytest.mark.asyncio
    async def test_update_unknown_camper(self, camper_service: CamperService) -> None:
        with pytest.raises(NotFoundError):
            await camper_service.update_camper("missing", CamperUpdate(full_name="Someone"))


class TestDeleteCamper:
    """Test camper deletion."""

    @pytest.mark.asyncio
    async def test_delete_without_registrations(
        self, make_user, make_camper, camper_service: CamperService
    ) -> None:
        parent = await make_user("parenta", "11111111111")
        camper = await make_camper(parent.id, "22222222222")

        deleted = await camper_service.delete_camper(camper.id)

        assert deleted.id == camper.id
        assert deleted.parent == parent.id
        assert await camper_service.find_by_id(camper.id) is None

    @pytest.mark.asyncio
    async def test_delete_with_registration_blocked(
        self,
        make_user,
        make_camper,
        camper_service: CamperService,
        registration_service,
        build_registration,
    ) -> None:
        parent = await make_user("parenta", "11111111111")
        camper = await make_camper(parent.id, "22222222222")
        await registration_service.create_registration(
            build_registration(camper.id, parent.id)
        )

        with pytest.raises(ReferentialConflictError) as exc_info:
            await camper_service.delete_camper(camper.id)

        assert exc_info.value.status_code == 409
        assert await camper_service.find_by_id(camper.id) is not None

    @pytest.mark.asyncio
    async def test_delete_unknown_camper(self, camper_service: CamperService) -> None:
        with pytest.raises(NotFoundError):
            await camper_service.delete_camper("missing")


class TestCamperQueries:
    """Test camper lookups."""

    @pytest.mark.asyncio
    async def test_find_by_owner_only_returns_own_campers(
        self, make_user, make_camper, camper_service: CamperService
    ) -> None:
        parent_a = await make_user("parenta", "11111111111")
        parent_b = await make_user("parentb", "33333333333")
        await make_camper(parent_a.id, "22222222222")
        await make_camper(parent_a.id, "44444444444")
        await make_camper(parent_b.id, "55555555555")

        campers = await camper_service.find_by_owner(parent_a.id)

        assert sorted(c.amka for c in campers) == ["22222222222", "44444444444"]

    @pytest.mark.asyncio
    async def test_find_by_amka(
        self, make_user, make_camper, camper_service: CamperService
    ) -> None:
        parent = await make_user("parenta", "11111111111")
        camper = await make_camper(parent.id, "22222222222")

        found = await camper_service.find_by_amka("22222222222")

        assert found is not None
        assert found.id == camper.id
        assert await camper_service.find_by_amka("99999999999") is None

    @pytest.mark.asyncio
    async def test_deleted_parent_populates_as_none(
        self, make_user, make_camper, camper_service: CamperService, user_service
    ) -> None:
        parent = await make_user("parenta", "11111111111")
        camper = await make_camper(parent.id, "22222222222")
        await user_service.delete_user(parent.id)

        found = await camper_service.find_by_id(camper.id)

        assert found is not None
        assert found.parent is None


class TestAmkaAvailability:
    """Test the cross-namespace AMKA check."""

    @pytest.mark.asyncio
    async def test_available(self, camper_service: CamperService) -> None:
        result = await camper_service.check_amka_availability("99999999999")

        assert result.available is True
        assert result.is_camper_amka is False
        assert result.is_parent_amka is False
        assert result.message == "AMKA available"

    @pytest.mark.asyncio
    async def test_claimed_by_camper(
        self, make_user, make_camper, camper_service: CamperService
    ) -> None:
        parent = await make_user("parenta", "11111111111")
        await make_camper(parent.id, "22222222222")

        result = await camper_service.check_amka_availability("22222222222")

        assert result.available is False
        assert result.is_camper_amka is True
        assert result.is_parent_amka is False
        assert result.message == "AMKA registered as camper"

    @pytest.mark.asyncio
    async def test_claimed_by_parent(
        self, make_user, camper_service: CamperService
    ) -> None:
        await make_user("parenta", "11111111111")

        result = await camper_service.check_amka_availability("11111111111")

        assert result.available is False
        assert result.is_parent_amka is True
        assert result.is_camper_amka is False
        assert result.message == "AMKA registered as parent"

    @pytest.mark.parametrize("amka", ["1234", "1234567890a", "123456789012", ""])
    @pytest.mark.asyncio
    async def test_malformed_amka_rejected(
        self, camper_service: CamperService, amka: str
    ) -> None:
        with pytest.raises(InvalidFormatError) as exc_info:
            await camper_service.check_amka_availability(amka)

        assert exc_info.value.error_code == ErrorKind.INVALID_FORMAT
