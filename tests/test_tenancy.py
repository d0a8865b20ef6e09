import pytest

from marine_ops.exceptions import ConflictError, DomainValidationError, NotFoundError
from marine_ops.marine.vessels import VesselManager
from marine_ops.tenancy import CompanyManager, company_scope


async def test_scope_of_parent_includes_subsidiaries(db_session, companies):
    scope = await company_scope(db_session, companies["parent"].id)

    assert set(scope) == {c.id for c in companies.values()}


async def test_scope_of_subsidiary_is_itself(db_session, companies):
    assert await company_scope(db_session, companies["marine"].id) == [companies["marine"].id]
    assert await company_scope(db_session, None) is None


async def test_listing_by_parent_shows_subsidiary_records(db_session, companies):
    manager = VesselManager(db_session)
    await manager.create_vessel(name="Al Noor", company_id=companies["marine"].id)
    await manager.create_vessel(name="Unassigned Barge")

    by_parent = await manager.list_vessels(company_id=companies["parent"].id)
    by_scrap = await manager.list_vessels(company_id=companies["scrap"].id)

    assert [v.name for v in by_parent] == ["Al Noor"]
    assert by_scrap == []
    assert len(await manager.list_vessels()) == 2


async def test_create_company_rejects_duplicates_and_unknown_types(db_session, companies):
    manager = CompanyManager(db_session)

    with pytest.raises(ConflictError):
        await manager.create_company("Gulf Marine", "marine")
    with pytest.raises(DomainValidationError):
        await manager.create_company("Gulf Logistics", "logistics")
    with pytest.raises(NotFoundError):
        await manager.create_company("Gulf Towing", "marine", parent_id=9999)


async def test_company_cannot_be_its_own_parent(db_session, companies):
    manager = CompanyManager(db_session)

    with pytest.raises(DomainValidationError):
        await manager.update_company(companies["marine"].id, parent_id=companies["marine"].id)


async def test_delete_blocked_while_subsidiaries_exist(db_session, companies):
    manager = CompanyManager(db_session)

    with pytest.raises(ConflictError):
        await manager.delete_company(companies["parent"].id)

    await manager.delete_company(companies["scrap"].id)
    await manager.delete_company(companies["marine"].id)
    await manager.delete_company(companies["parent"].id)
    assert await manager.list_companies() == []


async def test_list_companies_filters_by_type(db_session, companies):
    manager = CompanyManager(db_session)

    marine = await manager.list_companies(company_type="marine")

    assert [c.name for c in marine] == ["Gulf Marine"]
